"""Entry point for `python -m trackdesk`."""

from trackdesk.cli import main

if __name__ == "__main__":  # pragma: no cover
    main()
