#!/usr/bin/env python3
"""
Net-Estimate 主程序入口
"""

import sys

from net_estimate.cli.commands import main

if __name__ == "__main__":
    sys.exit(main())
