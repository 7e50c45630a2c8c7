"""Entry point for ``python -m textophile``."""

from textophile.cli import app

if __name__ == "__main__":
    app()
