#!/usr/bin/env python3
"""
Main entry point for the Sound Point Bot
"""

import sys

from soundpoint.__main__ import main

if __name__ == "__main__":
    sys.exit(main())
