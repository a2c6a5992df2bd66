"""
Command-line entry point for the medicine schedule and reminder engine.
"""

from .cli import app


def main() -> None:
    # Console script target declared in pyproject: `medsched plan|check|run`.
    app()
