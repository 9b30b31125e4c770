import sys

from roomfire.cli import main

sys.exit(main())
