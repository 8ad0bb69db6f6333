"""Module entrypoint for ``python -m millerbrowse``."""

from .cli import main


if __name__ == "__main__":
    main()
