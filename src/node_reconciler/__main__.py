import sys

from node_reconciler.cli import main

if __name__ == "__main__":
    sys.exit(main())
