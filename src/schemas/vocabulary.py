"""Controlled vocabularies used by the package model.

Each vocabulary pairs an enumeration of known values with an escape hatch:
values outside the enumeration are kept verbatim as ``other_value`` so that
nothing declared in a description document is lost.
"""

from enum import Enum

from pydantic import BaseModel


class IPRole(str, Enum):
    """OAIS role of an information package."""

    SIP = "SIP"
    AIP = "AIP"
    DIP = "DIP"


class IPStatus(str, Enum):
    """Record status declared in the METS header."""

    NEW = "NEW"
    UPDATED = "UPDATED"
    DELETED = "DELETED"


class CreatorType(str, Enum):
    """Agent type declared in the METS header."""

    INDIVIDUAL = "INDIVIDUAL"
    ORGANIZATION = "ORGANIZATION"
    OTHER = "OTHER"


class ContentCategory(str, Enum):
    """Content type of a package or representation."""

    SFSB = "SFSB"
    RDB = "RDB"
    ERMS = "ERMS"
    GEODATA = "GEODATA"
    MIXED = "MIXED"
    PL_EXPEDIENT = "PL_EXPEDIENT"
    PL_EXP_UPF = "PL_EXP_UPF"
    PL_DOCUMENT = "PL_DOCUMENT"
    OTHER = "OTHER"


class RepresentationStatusCategory(str, Enum):
    ORIGINAL = "ORIGINAL"
    OTHER = "OTHER"


class MetadataCategory(str, Enum):
    """Known metadata types.

    The member name is the canonical name; the value is the display form
    written to ``MDTYPE``/``OTHERMDTYPE`` attributes.
    """

    MARC = "MARC"
    MODS = "MODS"
    EAD = "EAD"
    DC = "DC"
    NISOIMG = "NISOIMG"
    LCAV = "LC-AV"
    VRA = "VRA"
    TEIHDR = "TEIHDR"
    DDI = "DDI"
    FGDC = "FGDC"
    LOM = "LOM"
    PREMIS = "PREMIS"
    PREMISOBJECT = "PREMIS:OBJECT"
    PREMISAGENT = "PREMIS:AGENT"
    PREMISRIGHTS = "PREMIS:RIGHTS"
    PREMISEVENT = "PREMIS:EVENT"
    TEXTMD = "TEXTMD"
    METSRIGHTS = "METSRIGHTS"
    ISO191152003 = "ISO 19115:2003"
    NAP = "NAP"
    EACCPF = "EAC-CPF"
    LIDO = "LIDO"
    I_ARXIU_VOC_DOC = "Voc_document"
    I_ARXIU_VOC_DOC_EXP = "Voc_document_exp"
    I_ARXIU_VOC_UPF = "Voc_UPF"
    I_ARXIU_VOC_EXP = "Voc_expedient"
    I_ARXIU_DC = "dc_SimpleDC20021212"
    I_ARXIU_DOC = "iArxiu-doc"
    I_ARXIU_EXP = "iArxiu-exp"
    OTHER = "OTHER"


class MetadataType(BaseModel):
    """A metadata type: a known category or a free-text other type.

    Attributes:
        category: Known category, OTHER when the declared type is unrecognized
        other_value: Verbatim declared type for OTHER, or an informative
            original type kept alongside a normalized category
    """

    category: MetadataCategory = MetadataCategory.OTHER
    other_value: str | None = None

    model_config = {"frozen": True}

    def as_canonical_string(self) -> str:
        if self.category is MetadataCategory.OTHER and self.other_value is not None:
            return self.other_value
        return self.category.value

    def __str__(self) -> str:
        return self.as_canonical_string()


class ContentType(BaseModel):
    """Content type of a package or representation."""

    category: ContentCategory = ContentCategory.MIXED
    other_value: str | None = None

    model_config = {"frozen": True}

    def as_string(self) -> str:
        if self.category is ContentCategory.OTHER and self.other_value:
            return self.other_value
        return self.category.value


class RepresentationStatus(BaseModel):
    """Status of a representation (ORIGINAL, or free text such as NORMALIZED)."""

    category: RepresentationStatusCategory = RepresentationStatusCategory.ORIGINAL
    other_value: str | None = None

    model_config = {"frozen": True}

    def as_string(self) -> str:
        if self.category is RepresentationStatusCategory.OTHER and self.other_value:
            return self.other_value
        return self.category.value
