import sys

from pi.kilo.cli import main

sys.exit(main())
