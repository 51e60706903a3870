import sys

from pylocust.cli import main

sys.exit(main())
