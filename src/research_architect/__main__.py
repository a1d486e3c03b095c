#!/usr/bin/env python3
"""
Allows running the package with: python -m research_architect --args
"""

from .main import cli

if __name__ == "__main__":
    cli()
