"""Command-line interface for the stream supervisor."""
