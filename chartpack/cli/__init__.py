"""Chartpack CLI — Typer-based command-line interface.

Provides the ``chartpack`` command with subcommands for inspecting chart
archives and reporting the installed version.

All output uses Rich for formatted terminal display.
"""
