import sys

from mrwatch.cli import main

sys.exit(main())
