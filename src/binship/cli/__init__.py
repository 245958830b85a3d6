"""Command line interface for binship."""
