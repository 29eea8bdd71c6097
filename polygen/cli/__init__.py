"""Command line interface for polygen."""
