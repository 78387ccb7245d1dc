import sys

from subwaymap.cli import main

sys.exit(main())
