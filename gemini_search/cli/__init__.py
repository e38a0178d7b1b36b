"""Command line interface for gemini-search."""
