import sys

from actionapi.cli import main

sys.exit(main())
