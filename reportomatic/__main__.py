"""Allow ``python -m reportomatic`` as an alias of ``reportomatic-cli``."""

from reportomatic.cli import main


if __name__ == "__main__":  # pragma: no cover
    main()
