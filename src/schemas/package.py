"""Information package object model.

A Package is what the parser returns and what the builder consumes. Layout of
a package on disk (common profile)::

    {package}/
    ├── METS.xml
    ├── metadata/
    │   ├── descriptive/
    │   ├── preservation/
    │   └── other/
    ├── representations/
    │   └── {rep_id}/
    │       ├── METS.xml
    │       ├── data/
    │       ├── metadata/
    │       ├── schemas/
    │       └── documentation/
    ├── schemas/
    ├── documentation/
    └── submission/            # AIP only
"""

from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, Field, model_validator

from .report import ValidationReport
from .vocabulary import (
    ContentType,
    CreatorType,
    IPRole,
    IPStatus,
    MetadataCategory,
    MetadataType,
    RepresentationStatus,
)


class Agent(BaseModel):
    """An agent declared in a METS header.

    Attributes:
        name: Agent name
        role: METS agent role (CREATOR, ARCHIVIST, ..., OTHER)
        other_role: Free-text role when role is OTHER
        type: Agent type
        other_type: Free-text type when type is OTHER
        note: Optional note (e.g. software version)
    """

    name: str
    role: str = "CREATOR"
    other_role: str | None = None
    type: CreatorType = CreatorType.ORGANIZATION
    other_type: str | None = None
    note: str | None = None


class IPFile(BaseModel):
    """A file inside a package.

    IPFile values are never mutated; renaming or moving produces a copy.

    Attributes:
        path: Absolute local path of the file content
        file_name: Logical name inside the package (defaults to the basename)
        relative_folders: Folders between the zone root and the file
        checksum: Declared or computed checksum (hex)
        checksum_algorithm: Algorithm name as written in METS (e.g. SHA-256)
        mimetype: MIME type
        size: Size in bytes
        created: Creation timestamp
    """

    path: Path
    file_name: str = ""
    relative_folders: list[str] = []
    checksum: str | None = None
    checksum_algorithm: str | None = None
    mimetype: str | None = None
    size: int | None = None
    created: datetime | None = None

    model_config = {"frozen": True}

    @model_validator(mode="before")
    @classmethod
    def _default_file_name(cls, data):
        if isinstance(data, dict) and not data.get("file_name") and data.get("path"):
            data = {**data, "file_name": Path(data["path"]).name}
        return data

    def renamed(self, file_name: str) -> "IPFile":
        return self.model_copy(update={"file_name": file_name})

    def in_folders(self, *folders: str) -> "IPFile":
        return self.model_copy(update={"relative_folders": list(folders)})

    @property
    def relative_path(self) -> str:
        """Folders and file name joined with '/'."""
        return "/".join([*self.relative_folders, self.file_name])


class MetadataRecord(BaseModel):
    """A metadata file attached to a package or representation.

    Attributes:
        id: Identifier of the metadata section
        file: The metadata content
        metadata_type: Declared (resolved) metadata type
        created: Creation timestamp
    """

    id: str
    file: IPFile
    metadata_type: MetadataType = MetadataType(category=MetadataCategory.OTHER)
    created: datetime | None = None


class DescriptiveMetadata(MetadataRecord):
    """Descriptive metadata record; tracks the declared type version."""

    metadata_version: str | None = None


class PreservationMetadata(MetadataRecord):
    metadata_type: MetadataType = MetadataType(category=MetadataCategory.PREMIS)


class Representation(BaseModel):
    """One representation of the package content.

    Attributes:
        representation_id: Identifier, unique within the package
        object_id: OBJID of the representation description document
        description: Free-text description
        content_type: Representation content type
        status: Representation status (ORIGINAL by default)
        agents: Agents from the representation METS header
        descriptive_metadata: Descriptive metadata records
        preservation_metadata: Preservation metadata records
        other_metadata: Other metadata records
        data: Data files, in declared order
        schemas: Schema files
        documentation: Documentation files
    """

    representation_id: str
    object_id: str | None = None
    description: str | None = None
    content_type: ContentType = ContentType()
    status: RepresentationStatus = RepresentationStatus()
    agents: list[Agent] = []
    descriptive_metadata: list[DescriptiveMetadata] = []
    preservation_metadata: list[PreservationMetadata] = []
    other_metadata: list[MetadataRecord] = []
    data: list[IPFile] = []
    schemas: list[IPFile] = []
    documentation: list[IPFile] = []

    @property
    def has_metadata(self) -> bool:
        return bool(
            self.descriptive_metadata or self.preservation_metadata or self.other_metadata
        )


class Package(BaseModel):
    """An information package (SIP, AIP or DIP).

    Attributes:
        ids: Package identifiers; the first one is the primary id
        role: OAIS role
        profile: Name of the profile the package was read with
        description: Free-text description (METS LABEL)
        content_type: Package content type
        status: Record status
        create_date: Creation date from the METS header
        modification_date: Last modification date from the METS header
        agents: Header agents
        descriptive_metadata: Package-level descriptive metadata
        preservation_metadata: Package-level preservation metadata
        other_metadata: Package-level other metadata
        representations: Representations, in declared order
        schemas: Package-level schema files
        documentation: Package-level documentation files
        submissions: Submission files (AIP only)
        ancestors: Identifiers of parent packages
        base_path: Directory the package was read from
        report: Everything noticed while reading or building the package
    """

    ids: list[str] = Field(default_factory=list)
    role: IPRole = IPRole.SIP
    profile: str = "eark"
    description: str | None = None
    content_type: ContentType = ContentType()
    status: IPStatus = IPStatus.NEW
    create_date: datetime | None = None
    modification_date: datetime | None = None
    agents: list[Agent] = []
    descriptive_metadata: list[DescriptiveMetadata] = []
    preservation_metadata: list[PreservationMetadata] = []
    other_metadata: list[MetadataRecord] = []
    representations: list[Representation] = []
    schemas: list[IPFile] = []
    documentation: list[IPFile] = []
    submissions: list[IPFile] = []
    ancestors: list[str] = []
    base_path: Path | None = None
    report: ValidationReport = Field(default_factory=ValidationReport)

    @property
    def id(self) -> str | None:
        return self.ids[0] if self.ids else None

    def add_submission(self, file: IPFile) -> None:
        """Add a submission file.

        Raises:
            ValueError: If the package is not an AIP
        """
        if self.role is not IPRole.AIP:
            raise ValueError(f"Only AIPs carry submissions (role is {self.role.value})")
        self.submissions.append(file)

    def get_representation(self, representation_id: str) -> Representation | None:
        for representation in self.representations:
            if representation.representation_id == representation_id:
                return representation
        return None
