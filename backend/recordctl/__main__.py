import sys

from .ctl import main

if __name__ == "__main__":
    sys.exit(main())
