"""Resolution of declared type strings into controlled vocabularies.

Every function here is total and pure: unknown input never raises, it falls
back to an OTHER value that keeps the original string.
"""

from schemas.vocabulary import (
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

from .constants import METS_MDTYPES

# Alternative spellings, keyed by upper-cased form
METADATA_ALIASES: dict[str, MetadataCategory] = {
    "LC-AV": MetadataCategory.LCAV,
    "LC AV": MetadataCategory.LCAV,
    "PREMIS:OBJECT": MetadataCategory.PREMISOBJECT,
    "PREMIS:AGENT": MetadataCategory.PREMISAGENT,
    "PREMIS:RIGHTS": MetadataCategory.PREMISRIGHTS,
    "PREMIS:EVENT": MetadataCategory.PREMISEVENT,
    "ISO 19115:2003": MetadataCategory.ISO191152003,
    "ISO19115:2003": MetadataCategory.ISO191152003,
    "ISO 19115": MetadataCategory.ISO191152003,
    "EAC-CPF": MetadataCategory.EACCPF,
    "EAC_CPF": MetadataCategory.EACCPF,
    "DUBLIN CORE": MetadataCategory.DC,
    "DUBLINCORE": MetadataCategory.DC,
    "OAI_DC": MetadataCategory.DC,
    "SIMPLEDC": MetadataCategory.DC,
    "ISO 15836": MetadataCategory.DC,
    "URN:ISO:STD:ISO:15836": MetadataCategory.DC,
    "URN:IARXIU:2.0:VOCABULARIES:CESCA:VOC_DOCUMENT": MetadataCategory.I_ARXIU_VOC_DOC,
    "URN:IARXIU:2.0:VOCABULARIES:CESCA:VOC_DOCUMENT_EXP": MetadataCategory.I_ARXIU_VOC_DOC_EXP,
    "URN:IARXIU:2.0:VOCABULARIES:CESCA:VOC_UPF": MetadataCategory.I_ARXIU_VOC_UPF,
    "URN:IARXIU:2.0:VOCABULARIES:CESCA:VOC_EXPEDIENT": MetadataCategory.I_ARXIU_VOC_EXP,
}

_BY_NAME = {member.name: member for member in MetadataCategory}
_BY_DISPLAY = {member.value.upper(): member for member in MetadataCategory}


def match(raw: str | None) -> MetadataCategory | None:
    """Find the metadata category for a declared type string.

    Match order: exact member name, case-insensitive display value, alias
    table. Returns None when nothing matches.
    """
    if raw is None:
        return None
    if raw in _BY_NAME:
        return _BY_NAME[raw]
    key = raw.strip().upper()
    if not key:
        return None
    if key in _BY_DISPLAY:
        return _BY_DISPLAY[key]
    return METADATA_ALIASES.get(key)


def is_recognized(raw: str | None) -> bool:
    return match(raw) is not None


def resolve(raw: str | None) -> MetadataType:
    """Resolve a declared type string into a MetadataType.

    Unrecognized strings (including the empty string) resolve to OTHER with
    the original string kept verbatim, so ``as_canonical_string`` gives it
    back unchanged.
    """
    category = match(raw)
    if category is None:
        return MetadataType(category=MetadataCategory.OTHER, other_value=raw or "")
    return MetadataType(category=category)


def resolve_declared(mdtype: str | None, other_mdtype: str | None) -> MetadataType:
    """Resolve an MDTYPE/OTHERMDTYPE attribute pair.

    OTHERMDTYPE refines an OTHER MDTYPE (and may itself name a known type);
    alongside a known MDTYPE it is kept as the informative other value.
    """
    declared = resolve(mdtype)
    if not other_mdtype:
        return declared
    if declared.category is MetadataCategory.OTHER:
        return resolve(other_mdtype)
    return MetadataType(category=declared.category, other_value=other_mdtype)


def as_canonical_string(metadata_type: MetadataType) -> str:
    return metadata_type.as_canonical_string()


def mets_mdtype_attributes(metadata_type: MetadataType) -> tuple[str, str | None]:
    """MDTYPE and OTHERMDTYPE values for writing a metadata type.

    Categories outside the METS MDTYPE enumeration are written as OTHER with
    their display value, so ``resolve_declared`` reproduces the same category.
    OTHERMDTYPE then holds the category, so an informative ``other_value``
    kept beside such a category (e.g. the declared vocabulary of a legacy
    section) is not written and does not survive a rebuild.
    """
    category = metadata_type.category
    if category is MetadataCategory.OTHER:
        return "OTHER", metadata_type.other_value or None
    if category.value in METS_MDTYPES:
        return category.value, metadata_type.other_value
    return "OTHER", category.value


def parse_content_type(
    raw: str | None,
    default: ContentCategory = ContentCategory.OTHER,
) -> tuple[ContentType, bool]:
    """Parse a content type name.

    Returns:
        The content type and whether the name was recognized. Unrecognized
        names give ``default`` (keeping the raw name when default is OTHER).
    """
    key = (raw or "").strip().upper()
    for member in ContentCategory:
        if member.value == key:
            return ContentType(category=member), True
    if default is ContentCategory.OTHER:
        return ContentType(category=ContentCategory.OTHER, other_value=raw or None), False
    return ContentType(category=default), False


def parse_role(raw: str | None) -> IPRole | None:
    key = (raw or "").strip().upper()
    try:
        return IPRole(key)
    except ValueError:
        return None


def parse_status(raw: str | None) -> tuple[IPStatus, bool]:
    """Parse a METS RECORDSTATUS; unknown values give NEW."""
    key = (raw or "").strip().upper()
    if not key:
        return IPStatus.NEW, True
    try:
        return IPStatus(key), True
    except ValueError:
        return IPStatus.NEW, False


def parse_representation_status(raw: str | None) -> RepresentationStatus:
    if not raw or raw.strip().upper() == RepresentationStatusCategory.ORIGINAL.value:
        return RepresentationStatus()
    return RepresentationStatus(category=RepresentationStatusCategory.OTHER, other_value=raw)


def parse_creator_type(raw: str | None) -> tuple[CreatorType, str | None]:
    key = (raw or "").strip().upper()
    if not key:
        return CreatorType.ORGANIZATION, None
    try:
        return CreatorType(key), None
    except ValueError:
        return CreatorType.OTHER, raw
