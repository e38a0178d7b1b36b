"""Gemini Search: web search and page analysis through an OpenAI-compatible Gemini endpoint."""

__version__ = "1.0.0"
