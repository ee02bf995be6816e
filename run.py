import sys

from albumscrobbler.main import main


def run():
    """Entry point for album-scrobbler command."""
    sys.exit(main())


if __name__ == "__main__":
    run()
