#!/usr/bin/env python3
"""VMware Host Suspend Helper - Module entry point."""
import sys

from vmsuspend.cli import main

if __name__ == "__main__":
    sys.exit(main())
