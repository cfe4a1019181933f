"""Command-line interface for psqlm."""
