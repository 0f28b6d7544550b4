#!/usr/bin/env python3
"""Gear entry point.

Run with:
    python main.py
    python -m gear
"""

from gear.__main__ import main


if __name__ == "__main__":
    main()
