"""Package entrypoint so `python -m stockfolio ...` runs the CLI."""

import sys

from .cli import main

if __name__ == "__main__":
    # Hand off to the command-line interface.
    sys.exit(main())
