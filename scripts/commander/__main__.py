"""Entry point: python -m commander"""

import sys

from commander.cli import main

if __name__ == "__main__":
    sys.exit(main())
