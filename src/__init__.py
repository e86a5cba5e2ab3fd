"""
Source root of the sqlbackup project.

Packages:
- sqlbackup: SQL Server backup, restore and maintenance command line tool
"""
