"""Allow running profclean as ``python -m profclean``."""

from profclean.cli.main import app

if __name__ == "__main__":
    app()
