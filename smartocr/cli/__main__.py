"""Allow ``python -m smartocr.cli`` execution."""

import sys

from smartocr.cli.extract import main

sys.exit(main())
