"""Command-line interface package for csfmorph."""
