"""METS description document reading and writing."""

from .reader import METSReader, parse_datetime, read_mets
from .writer import (
    DEFAULT_SCHEMA_LOCATION,
    REPRESENTATION_SCHEMA_LOCATION,
    METSWriter,
    write_mets,
)

__all__ = [
    "DEFAULT_SCHEMA_LOCATION",
    "METSReader",
    "METSWriter",
    "REPRESENTATION_SCHEMA_LOCATION",
    "parse_datetime",
    "read_mets",
    "write_mets",
]
