"""Allow ``python -m dualserve``."""

import sys

from .cli import main

sys.exit(main())
