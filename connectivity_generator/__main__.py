"""Allow ``python -m connectivity_generator``."""

import sys

from connectivity_generator.cli import main

sys.exit(main())
