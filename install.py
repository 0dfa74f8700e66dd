#!/usr/bin/env python3
# filename: install.py
# -*- coding: utf-8 -*-
"""
Entry point for the Zulip production installer.

Run from the root of an unpacked Zulip release, as root:

    ./install.py --hostname=zulip.example.com --email=admin@example.com --certbot
"""

import sys

from installer.main_installer import main

if __name__ == "__main__":
    sys.exit(main())
