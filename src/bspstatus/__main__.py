"""Console status bar: `python -m bspstatus`"""

import sys

from bspstatus.render import watch
from bspstatus.telemetry import setup_logging


def main():
    """入口函数"""
    setup_logging()
    try:
        sys.exit(watch())
    except KeyboardInterrupt:
        sys.exit(0)


if __name__ == "__main__":
    main()
