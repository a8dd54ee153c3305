"""Entry point for `python -m swgen`."""

from .cli import main

if __name__ == "__main__":
    main()
