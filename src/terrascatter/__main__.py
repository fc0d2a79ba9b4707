"""Allow running as ``python -m terrascatter``."""

from .cli import main

if __name__ == "__main__":
    main()
