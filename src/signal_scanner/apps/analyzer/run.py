"""CLI entry point for the signal scanner.

Provide access to the Typer app and the ``signal-scanner`` console
script. All command logic lives in the cli subpackage.
"""

from signal_scanner.apps.analyzer.cli import app

__all__ = ["app", "main"]


def main() -> None:
    """Run the signal scanner CLI application."""
    app()


if __name__ == "__main__":
    main()
