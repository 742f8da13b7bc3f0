"""Module wrapper so ``python -m reportomatic.cli`` matches the console script."""

from reportomatic.cli import main


if __name__ == "__main__":  # pragma: no cover
    main()
