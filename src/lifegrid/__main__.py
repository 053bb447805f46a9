"""Allow ``python -m lifegrid`` to run the command-line interface."""

import sys

from .frontends.cli import main

sys.exit(main())
