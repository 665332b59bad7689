import sys

from statefield.cli import main

sys.exit(main())
