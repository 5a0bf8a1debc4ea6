"""Command-line interface for shttp."""
