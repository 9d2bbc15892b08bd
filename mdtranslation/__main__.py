"""Allow ``python -m mdtranslation``."""

import sys

from mdtranslation.cli import main

sys.exit(main())
