"""
Command-line entry point for the vaccine dose scheduler.
"""

from .cli import app


def main() -> None:
    # Delegate to Typer app so `vaxsched ...` works.
    app()
