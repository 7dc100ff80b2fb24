"""Plain structs for METS description documents.

These mirror the parts of the METS schema the reader and writer handle. They
carry no behaviour beyond building the ID index used to resolve FILEID, DMDID
and ADMID references.
"""

from datetime import datetime
from typing import Literal, Union

from pydantic import BaseModel

MetadataSectionKind = Literal["dmdSec", "techMD", "rightsMD", "sourceMD", "digiprovMD"]


class MetsAgent(BaseModel):
    role: str = "CREATOR"
    other_role: str | None = None
    type: str | None = None
    other_type: str | None = None
    name: str = ""
    notes: list[str] = []


class MetsHeader(BaseModel):
    create_date: datetime | None = None
    last_mod_date: datetime | None = None
    record_status: str | None = None
    agents: list[MetsAgent] = []


class MetadataReference(BaseModel):
    """An mdRef: metadata held in a separate file.

    Attributes:
        id: ID of the mdRef element (optional in METS)
        href: xlink:href of the referenced file
        loctype: Locator type (URL)
        mdtype: Declared MDTYPE
        other_mdtype: Declared OTHERMDTYPE
        mdtype_version: Declared MDTYPEVERSION
        mimetype: MIME type of the referenced file
        size: Size in bytes
        created: Creation timestamp
        checksum: Declared checksum
        checksum_type: Declared checksum algorithm
    """

    id: str | None = None
    href: str
    loctype: str = "URL"
    mdtype: str | None = None
    other_mdtype: str | None = None
    mdtype_version: str | None = None
    mimetype: str | None = None
    size: int | None = None
    created: datetime | None = None
    checksum: str | None = None
    checksum_type: str | None = None


class MetadataWrap(BaseModel):
    """An mdWrap: metadata embedded in the description document.

    Attributes:
        mdtype: Declared MDTYPE
        other_mdtype: Declared OTHERMDTYPE
        mdtype_version: Declared MDTYPEVERSION
        mimetype: MIME type of the embedded content
        xml_content: Serialized xmlData payload (first element child)
        binary_content: Decoded binData payload
    """

    mdtype: str | None = None
    other_mdtype: str | None = None
    mdtype_version: str | None = None
    mimetype: str | None = None
    xml_content: bytes | None = None
    binary_content: bytes | None = None

    @property
    def content(self) -> bytes | None:
        return self.xml_content if self.xml_content is not None else self.binary_content


class MetadataSection(BaseModel):
    """A dmdSec or one of the amdSec children."""

    id: str
    kind: MetadataSectionKind = "dmdSec"
    created: datetime | None = None
    status: str | None = None
    reference: MetadataReference | None = None
    wrap: MetadataWrap | None = None

    @property
    def mdtype(self) -> str | None:
        source = self.reference or self.wrap
        return source.mdtype if source else None

    @property
    def other_mdtype(self) -> str | None:
        source = self.reference or self.wrap
        return source.other_mdtype if source else None


class FileLocation(BaseModel):
    href: str
    loctype: str = "URL"


class FileEntry(BaseModel):
    """A fileSec file element."""

    id: str
    mimetype: str | None = None
    size: int | None = None
    created: datetime | None = None
    checksum: str | None = None
    checksum_type: str | None = None
    locations: list[FileLocation] = []

    @property
    def href(self) -> str | None:
        return self.locations[0].href if self.locations else None


class FileGroup(BaseModel):
    id: str | None = None
    use: str | None = None
    files: list[FileEntry] = []
    groups: list["FileGroup"] = []

    def all_files(self) -> list[FileEntry]:
        """Files of this group and all nested groups, in document order."""
        collected = list(self.files)
        for group in self.groups:
            collected.extend(group.all_files())
        return collected


class FilePointer(BaseModel):
    file_id: str


class MetsPointer(BaseModel):
    href: str
    loctype: str = "URL"


class Div(BaseModel):
    """A structMap div."""

    id: str | None = None
    label: str | None = None
    type: str | None = None
    order: int | None = None
    dmd_ids: list[str] = []
    adm_ids: list[str] = []
    file_pointers: list[FilePointer] = []
    mets_pointers: list[MetsPointer] = []
    divs: list["Div"] = []

    def describe(self) -> str:
        """Short description used as report source."""
        return f"div[LABEL={self.label!r}, ID={self.id!r}]"


class StructMap(BaseModel):
    id: str | None = None
    type: str | None = None
    label: str | None = None
    div: Div | None = None


IndexTarget = Union[MetadataSection, FileEntry, FileGroup]


class MetsDocument(BaseModel):
    """A parsed METS description document.

    Attributes:
        objid: OBJID attribute
        type: TYPE attribute
        label: LABEL attribute
        profile: PROFILE attribute
        header: metsHdr content
        metadata_sections: dmdSec and amdSec children, in document order
        file_groups: Top-level fileSec groups
        struct_maps: structMap elements, in document order
    """

    objid: str | None = None
    type: str | None = None
    label: str | None = None
    profile: str | None = None
    header: MetsHeader = MetsHeader()
    metadata_sections: list[MetadataSection] = []
    file_groups: list[FileGroup] = []
    struct_maps: list[StructMap] = []

    def index(self) -> dict[str, IndexTarget]:
        """Map element IDs to metadata sections, files and file groups.

        mdRef IDs are indexed as aliases of their section so pointers may use
        either identifier.
        """
        index: dict[str, IndexTarget] = {}
        for section in self.metadata_sections:
            index[section.id] = section
            if section.reference is not None and section.reference.id:
                index.setdefault(section.reference.id, section)

        def add_group(group: FileGroup) -> None:
            if group.id:
                index.setdefault(group.id, group)
            for entry in group.files:
                index.setdefault(entry.id, entry)
            for child in group.groups:
                add_group(child)

        for group in self.file_groups:
            add_group(group)
        return index
