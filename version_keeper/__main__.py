"""Allow running as ``python -m version_keeper``."""

from .cli import main

if __name__ == "__main__":
    main()
