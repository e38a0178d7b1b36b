import sys

from gemini_search.cli.main import main

sys.exit(main())
