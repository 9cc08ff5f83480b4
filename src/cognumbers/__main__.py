"""Allow ``python -m cognumbers``."""

import sys

from .cli import main

sys.exit(main())
