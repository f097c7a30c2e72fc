"""Command line interface for pngstego."""
