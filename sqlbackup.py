#!/usr/bin/env python3
"""
sqlbackup - SQL Server backup, restore and maintenance tool

Usage examples:
    python sqlbackup.py /LIST /C LOCAL
    python sqlbackup.py /BACKUP /C LOCAL /DIR D:\\SqlBackup /ALL dev /VERIFY
    python sqlbackup.py /RESTORE /C LOCAL /DIR D:\\SqlBackup /DB dev test /ID -2
    python sqlbackup.py /INFO /C LOCAL /FILE D:\\SqlBackup\\all.bak
"""

import sys

from src.sqlbackup.cli import main

if __name__ == "__main__":
    sys.exit(main())
