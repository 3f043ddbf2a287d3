"""Allow running seedmatch as ``python -m seedmatch``."""

from .cli import main

if __name__ == "__main__":
    main()
