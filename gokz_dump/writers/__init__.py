"""
Writers package for gokz-dump.

Re-exports the writer interfaces and the concrete CSV and JSON writers so
callers can import from `gokz_dump.writers` directly.
"""

from gokz_dump.writers.abstract import (
    AbstractRecordWriter,
    RecordWriter,
    WriteResult,
    create_dump_file,
    dump_file_name,
)
from gokz_dump.writers.csv_writer import CsvRecordWriter
from gokz_dump.writers.json_writer import JsonRecordWriter

__all__ = [
    # Abstracts
    "AbstractRecordWriter",
    "RecordWriter",
    "WriteResult",
    "create_dump_file",
    "dump_file_name",
    # Concrete writers
    "CsvRecordWriter",
    "JsonRecordWriter",
]
