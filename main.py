#!/usr/bin/env python3
"""
Metabase Export - Development CLI wrapper.

Convenience script for running the CLI without installing the package.
For production use, install the package and use: metabase-export

Usage:
    python main.py dump
    python main.py dump --snapshot snapshot.json --output-dir output/dump
"""

import sys

from metabase_export.cli import main

if __name__ == "__main__":
    sys.exit(main())
