import sys

from gitreviewer.cli import main

sys.exit(main())
