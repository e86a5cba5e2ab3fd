"""
Usage text shown for /? and /HELP
"""

from typing import Optional

from rich.console import Console

HELP_TEXT = r"""sqlbackup
Back up, restore and maintain SQL Server databases using the server's own
BACKUP and RESTORE statements. The backup files are regular SQL Server backup
sets and can also be restored with any other SQL Server tool.

Usage: sqlbackup <mode> /C <connection> [arguments]

Modes:
  /LIST      List all user databases
  /BACKUP    Back up databases or transaction logs
  /RESTORE   Restore databases from a backup
  /OFFLINE   Take databases offline
  /ONLINE    Bring databases online
  /MODE      Change the recovery model of databases
  /DBINFO    Show basic database information
  /INFO      Show backup sets stored in a file or in the server history
  /PURGE     Delete the backup history the server keeps
  /? /HELP   Show this text

Connection (/C):
  Every mode except help needs a connection. The value is either an ODBC
  connection string, an ADO.NET style one (Data Source=...;User Id=...) or a
  SQLAlchemy URL (mssql+pyodbc://...). Two aliases are available, both with
  Windows authentication and encryption disabled:
    LOCAL     (localdb)\MSSQLLocalDB
    EXPRESS   .\SQLEXPRESS
  Credentials on the command line can be read by other users of the machine
  while the process runs.

  /C LOCAL
  /C "Server=SQLSRV\Instance;UID=backup;PWD=secret"

Selecting databases:
  /DB a b c       Operate on the listed databases only
  /ALL            Operate on every database shown by /LIST
  /ALL dev test   Operate on every database except 'dev' and 'test'
  Names are case insensitive. /ALL reads the database list from the server,
  so a deleted database can only be restored by naming it with /DB.

Backup location:
  /DIR <path>     One file per database, named <database>.db.bak
  /FILE <path>    One file shared by all selected databases
  Paths are opened by the database server, not by this machine.

/BACKUP <location> <databases> [/LOG] [/VERIFY]
  Appends a backup set to the file. /LOG backs up the transaction log, which
  requires the FULL or BULK_LOGGED recovery model. /VERIFY checks the new
  backup set without restoring it. Only online databases can be backed up.

/RESTORE <location> <databases> [/ID <n>] [/DISMOUNT]
  Restores the latest full backup of each database. /ID -2 picks the backup
  before the latest one, /ID -3 the one before that; /ID -1 is the latest.
  A positive /ID is the position of a backup set inside the file.
  /DISMOUNT takes each database offline after it has been restored.

/OFFLINE <databases>
/ONLINE <databases>
  Offline databases cannot be backed up but can be restored.

/MODE <databases> /FULL | /BULK | /SIMPLE
  /FULL     Point in time restores; log backups are required to keep the
            transaction log from growing
  /BULK     Like /FULL with minimal logging of bulk operations
  /SIMPLE   No log backups; changes since the last backup are unprotected

/DBINFO <databases>
  Shows state, access mode, read only flag, creation date and recovery model.

/INFO [<databases>] [<location>]
  With a location the backup sets are read from the file(s), otherwise from
  the history the server keeps.

/PURGE <databases>
  Deletes the server's backup history. Backup files are not touched.

Exit code: 0 on success, 1 when the arguments are invalid or the server
cannot be reached, otherwise the number of databases that failed.
"""


def print_help(console: Optional[Console] = None) -> None:
    """Print the usage text."""
    console = console or Console(highlight=False)
    console.print(HELP_TEXT, markup=False)
