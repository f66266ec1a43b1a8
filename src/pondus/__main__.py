"""Allow ``python -m pondus``."""

from pondus.cli.typer_app import app

if __name__ == "__main__":
    app()
