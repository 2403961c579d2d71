"""Command line interface for IdeaMerge."""
