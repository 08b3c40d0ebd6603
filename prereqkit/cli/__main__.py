"""
Entry point for running PrereqKit CLI as a module.

Usage: python -m prereqkit.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
