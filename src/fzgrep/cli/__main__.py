"""
CLI entry point for fzgrep.

This module serves as the entry point when fzgrep.cli is executed as a module
with `python -m fzgrep.cli`.
"""

from .main import main

if __name__ == "__main__":
    main()
