"""Resolvers turning description document references into model objects."""

from .classification import Classification, SectionKind, classify_section, normalized_type
from .files import (
    FileResolver,
    FileTarget,
    GroupTarget,
    MetadataTarget,
    PointerTarget,
    Unresolved,
    expand_pointer,
    files_for_target,
)
from .metadata import MetadataResolver

__all__ = [
    "Classification",
    "FileResolver",
    "FileTarget",
    "GroupTarget",
    "MetadataResolver",
    "MetadataTarget",
    "PointerTarget",
    "SectionKind",
    "Unresolved",
    "classify_section",
    "expand_pointer",
    "files_for_target",
    "normalized_type",
]
