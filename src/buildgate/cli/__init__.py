"""Command-line interface for buildgate."""
