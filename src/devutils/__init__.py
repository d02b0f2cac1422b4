"""
dev-utils - small command-line text and byte utilities.

Provides checksum, countfile, diff, hexdump and cloc.
"""

__version__ = "1.0.0"
PACKAGE_NAME = "dev-utils"
