"""
Infrastructure package for gokz-dump.

Holds the SQLite connection and extraction query execution. Keep this layer
focused on I/O, decoupled from validation and serialization.
"""

from gokz_dump.infrastructure.db_factory import database_uri, fetch_raw_rows, open_connection

__all__ = [
    "database_uri",
    "fetch_raw_rows",
    "open_connection",
]
