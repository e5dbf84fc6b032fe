import sys

from castgraph.main import main

sys.exit(main())
