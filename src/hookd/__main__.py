"""Allow ``python -m hookd``."""

from hookd.cli.app import app

if __name__ == "__main__":
    app()
