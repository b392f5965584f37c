"""
Entry point for python -m build_version

Allows running the package as a module:
    python -m build_version
"""

from .cli import main

if __name__ == '__main__':
    main()
