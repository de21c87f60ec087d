"""Allow running as `python -m minicron`."""

import sys

from .cli import main

sys.exit(main())
