"""CLI entry point."""

from swarmdeploy.cli.main import main


if __name__ == "__main__":
    main()
