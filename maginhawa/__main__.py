import sys

from maginhawa.cli import main

sys.exit(main())
