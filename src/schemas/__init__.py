"""Schema definitions for infopack."""

from .mets import (
    Div,
    FileEntry,
    FileGroup,
    FileLocation,
    FilePointer,
    MetadataReference,
    MetadataSection,
    MetadataWrap,
    MetsAgent,
    MetsDocument,
    MetsHeader,
    MetsPointer,
    StructMap,
)
from .package import (
    Agent,
    DescriptiveMetadata,
    IPFile,
    MetadataRecord,
    Package,
    PreservationMetadata,
    Representation,
)
from .report import ValidationEntry, ValidationLevel, ValidationReport
from .vocabulary import (
    ContentCategory,
    ContentType,
    CreatorType,
    IPRole,
    IPStatus,
    MetadataCategory,
    MetadataType,
    RepresentationStatus,
    RepresentationStatusCategory,
)

__all__ = [
    "Agent",
    "ContentCategory",
    "ContentType",
    "CreatorType",
    "DescriptiveMetadata",
    "Div",
    "FileEntry",
    "FileGroup",
    "FileLocation",
    "FilePointer",
    "IPFile",
    "IPRole",
    "IPStatus",
    "MetadataCategory",
    "MetadataRecord",
    "MetadataReference",
    "MetadataSection",
    "MetadataType",
    "MetadataWrap",
    "MetsAgent",
    "MetsDocument",
    "MetsHeader",
    "MetsPointer",
    "Package",
    "PreservationMetadata",
    "Representation",
    "RepresentationStatus",
    "RepresentationStatusCategory",
    "StructMap",
    "ValidationEntry",
    "ValidationLevel",
    "ValidationReport",
]
