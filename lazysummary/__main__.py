"""Module entrypoint for ``python -m lazysummary``."""

from .cli import main


if __name__ == "__main__":
    main()
