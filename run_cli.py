"""Run the looptimer CLI without installing the console script."""

from cli.cli import app

if __name__ == "__main__":
    app()
