#!/usr/bin/env python3
"""
TransVi Entry Point Script

This script initializes the CLI handler and runs the subtitle generation process.
"""

import sys
from transvi.cli import CLIHandler

if __name__ == "__main__":
    cli = CLIHandler()
    sys.exit(cli.run())
