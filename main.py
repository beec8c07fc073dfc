#!/usr/bin/env python3
"""
Bitone - black and white image dithering.

This is the main entry point for the Bitone application.
It supports API and CLI operating modes.

Available modes:
- convert (default): Dither a single image file
- api: A FastAPI-based API server for programmatic access
"""

import os
import sys

from bitone.cli import main as cli_main


def ensure_output_dirs():
    """Ensure that the required output directories exist."""
    os.makedirs("./out/dithered", exist_ok=True)


def main():
    """Main entry point for the application."""
    ensure_output_dirs()

    try:
        # Hand off control to the CLI module, which handles mode selection
        return cli_main()
    except KeyboardInterrupt:
        print("\nExiting Bitone...")
        return 130


if __name__ == "__main__":
    sys.exit(main())
