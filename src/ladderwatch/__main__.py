"""
Ladderwatch CLI Entry Point

Allows running the package as a module: python -m ladderwatch
"""

from ladderwatch.cli import main

if __name__ == "__main__":
    main()
