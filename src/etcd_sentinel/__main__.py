"""Allow ``python -m etcd_sentinel``."""

import sys

from .cli import main

sys.exit(main())
