"""Allow ``python -m ccs``."""

from ccs.cli import app

if __name__ == "__main__":
    app()
