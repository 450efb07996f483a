"""Entry point for running embedcompare as a module."""

from .cli import app


def main() -> None:
    """Main entry point for the embedcompare CLI application."""
    app()


if __name__ == "__main__":
    main()
