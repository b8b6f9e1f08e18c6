"""Typer commands for running transforms from the shell."""
