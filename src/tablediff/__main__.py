import sys

from tablediff.cli import main

sys.exit(main())
