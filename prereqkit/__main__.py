"""
Entry point for running PrereqKit CLI as a module.

Usage: python -m prereqkit [command] [options]
"""

from prereqkit.cli.parser import main

if __name__ == "__main__":
    main()
