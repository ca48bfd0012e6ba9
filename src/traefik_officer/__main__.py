"""python -m traefik_officer"""

import sys

from traefik_officer.cli import main

sys.exit(main())
