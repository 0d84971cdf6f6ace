"""Allow running the drafter as ``python -m book_drafter``."""

from .cli import main

if __name__ == "__main__":
    main()
