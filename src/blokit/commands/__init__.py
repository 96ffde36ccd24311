"""Typer sub-applications for the Blokit CLI."""
