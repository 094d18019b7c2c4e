"""
Attendance Report Engine

Command-line tool that turns check-in/check-out events, the working-days
calendar and approved leaves into monthly attendance reports.
"""

import sys
from pathlib import Path

# Add src directory to path for imports
sys.path.insert(0, str(Path(__file__).parent / "src"))

from application.cli import main


if __name__ == "__main__":
    sys.exit(main())
