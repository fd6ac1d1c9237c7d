#!/usr/bin/env python3
"""
Migrate all tenant data to the single 'owner' account.

Run this on the live server, then restart it. Relative paths resolve against
this checkout unless APP_ROOT is set.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from owner_migration.cli import main

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))

if __name__ == "__main__":
    sys.exit(main(project_root=PROJECT_ROOT))
