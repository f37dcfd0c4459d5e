"""
LabelMark - Main Entry Point
============================
Runs the command line tool from a source checkout.

Usage:
    python main.py mockup.png --option ol-logo

The installed ``labelmark`` command and ``python -m labelmark`` run the
same code from ``labelmark.cli``.
"""

import sys

from labelmark.cli import main

if __name__ == "__main__":
    sys.exit(main())
