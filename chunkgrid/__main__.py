import sys

from chunkgrid.main import main

sys.exit(main())
