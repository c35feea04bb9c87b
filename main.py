import sys

from indigo_ai.cli import main

if __name__ == "__main__":
    sys.exit(main())
