"""
Entry point for running iom_converter as a module.

Usage:
    python -m iom_converter /path/to/source /path/to/target
"""

from .cli import main

if __name__ == "__main__":
    main()
