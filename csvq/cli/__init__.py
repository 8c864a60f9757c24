"""Command-line interface for csvq."""
