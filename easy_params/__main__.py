"""Module entrypoint for `python -m easy_params`.

Delegates to the CLI implementation.
"""

import sys

from .cli import main


if __name__ == "__main__":
    sys.exit(main())
