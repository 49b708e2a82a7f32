"""
elfdecode Module Entry Point
=============================

Allows running the elfdecode CLI via: python -m elfdecode
"""

from elfdecode.cli import main

if __name__ == "__main__":
    main()
