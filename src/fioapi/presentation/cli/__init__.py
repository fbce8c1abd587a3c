"""Command-line interface.

The typer application lives in fioapi.presentation.cli.app.
"""
