"""Command line interface for the content layer."""
