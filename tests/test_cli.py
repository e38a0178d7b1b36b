import json

import pytest

from gemini_search import __version__
from gemini_search.cli import main as cli_main
from gemini_search.cli.error_handler import CLIErrorHandler, ExitCode
from gemini_search.errors import ConfigurationError, ValidationError
from gemini_search.web_search import GeminiSearchSkill


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    monkeypatch.setattr("gemini_search.cli.main.setup_logging", lambda: None)


@pytest.fixture()
def skill(settings):
    return GeminiSearchSkill(settings)


def test_search_prints_json(backend, skill, capsys):
    backend.reply("人工智能结果")

    code = cli_main.main(["search", "人工智能最新发展", "--num", "5", "--time", "1w"], skill=skill)

    assert code == ExitCode.SUCCESS.value
    output = json.loads(capsys.readouterr().out)
    assert output["query"] == "人工智能最新发展"
    assert output["numResults"] == 5
    assert output["timeRange"] == "1w"
    assert output["results"] == "人工智能结果"


def test_structured_search_flag(backend, skill, capsys):
    backend.reply("not json")

    code = cli_main.main(["search", "q", "--structured"], skill=skill)

    assert code == 0
    output = json.loads(capsys.readouterr().out)
    assert output["results"]["results"] == []
    assert output["results"]["summary"] == "not json"
    assert backend.requests[0]["json"]["response_format"] == {"type": "json_object"}


def test_fetch_with_prompt_and_model(backend, skill, capsys):
    backend.reply("summary")

    code = cli_main.main(["fetch", "https://example.com", "总结主要内容", "--model", "gemini-2.5-pro"], skill=skill)

    assert code == 0
    output = json.loads(capsys.readouterr().out)
    assert output["url"] == "https://example.com"
    assert output["content"] == "summary"
    assert backend.requests[0]["json"]["model"] == "gemini-2.5-pro"


def test_out_of_range_num_exits_with_validation_code(backend, skill, capsys):
    code = cli_main.main(["search", "q", "--num", "0"], skill=skill)

    assert code == ExitCode.VALIDATION_ERROR.value
    assert "numResults must be a number between 1 and 100" in capsys.readouterr().err
    assert backend.calls == 0


def test_invalid_url_exits_with_validation_code(backend, skill, capsys):
    code = cli_main.main(["fetch", "nope"], skill=skill)

    assert code == ExitCode.VALIDATION_ERROR.value
    assert "Invalid URL format" in capsys.readouterr().err


def test_authentication_failure_exit_code(backend, skill, capsys):
    backend.respond(401, "denied")

    code = cli_main.main(["search", "q"], skill=skill)

    assert code == ExitCode.PERMISSION_DENIED.value
    assert "Search failed" in capsys.readouterr().err
    assert backend.calls == 1


def test_missing_configuration_exit_code(capsys):
    code = cli_main.main(["search", "q"])

    assert code == ExitCode.CONFIGURATION_ERROR.value
    assert "GEMINI_BASE_URL is required" in capsys.readouterr().err


def test_info_command(skill, capsys):
    code = cli_main.main(["info"], skill=skill)

    assert code == 0
    output = json.loads(capsys.readouterr().out)
    assert output["initialized"] is True
    assert output["config"]["model"] == "gemini-2.5-flash-lite"


def test_version_flag(capsys):
    with pytest.raises(SystemExit) as exc:
        cli_main.main(["--version"])

    assert exc.value.code == 0
    assert f"Gemini Search Skill v{__version__}" in capsys.readouterr().out


def test_no_command_prints_help(capsys):
    assert cli_main.main([]) == 0
    assert "usage: gemini-search" in capsys.readouterr().out


def test_error_handler_exit_codes():
    handler = CLIErrorHandler()

    assert handler.handle_error(ConfigurationError("missing")).exit_code == ExitCode.CONFIGURATION_ERROR.value
    assert handler.handle_error(ValidationError("bad")).exit_code == ExitCode.VALIDATION_ERROR.value
    assert handler.handle_error(RuntimeError("boom")).exit_code == ExitCode.GENERAL_ERROR.value


def test_interrupt_exits_with_distinct_code(monkeypatch, skill, capsys):
    def interrupted(coro):
        coro.close()
        raise KeyboardInterrupt

    monkeypatch.setattr(cli_main.asyncio, "run", interrupted)

    code = cli_main.main(["search", "q"], skill=skill)

    assert code == ExitCode.INTERRUPTED.value == 130
    assert "Operation interrupted" in capsys.readouterr().err


def test_error_handler_interrupt_and_verbose_system_error():
    assert CLIErrorHandler().handle_error(KeyboardInterrupt()).exit_code == ExitCode.INTERRUPTED.value

    info = CLIErrorHandler(verbose=True).handle_error(RuntimeError("boom"))
    assert info.exit_code == ExitCode.GENERAL_ERROR.value
    assert "Root cause: RuntimeError: boom" in info.verbose_info
