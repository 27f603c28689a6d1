"""CLI entry point: python -m platerelay"""

from platerelay.cli import main

if __name__ == "__main__":
    main()
