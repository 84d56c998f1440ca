"""
Run the Dispatch Simulator CLI.

Usage:
    python -m dispatch_sim.interface roster
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
