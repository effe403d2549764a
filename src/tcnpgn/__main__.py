"""``python -m tcnpgn``."""

import sys

from tcnpgn.cli import main

sys.exit(main())
