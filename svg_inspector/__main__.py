import sys

from svg_inspector.cli import main

sys.exit(main())
