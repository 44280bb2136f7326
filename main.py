from __future__ import annotations

import sys

from build_notifier.cli import main

if __name__ == "__main__":
    sys.exit(main())
