"""Classification of legacy (iArxiu) inline metadata sections.

Legacy packages embed two kinds of descriptive record: documents (Dublin Core
style descriptions of single items) and expedients (case-file descriptions).
Which is which is only implied by the declared type, so the decision is made
here, once, and reported with how confident it is.
"""

from dataclasses import dataclass
from enum import Enum

from schemas.vocabulary import MetadataCategory, MetadataType

from .. import registry

DOCUMENT_CATEGORIES = frozenset(
    {
        MetadataCategory.DC,
        MetadataCategory.I_ARXIU_DC,
        MetadataCategory.I_ARXIU_DOC,
        MetadataCategory.I_ARXIU_VOC_DOC,
        MetadataCategory.I_ARXIU_VOC_DOC_EXP,
    }
)

EXPEDIENT_CATEGORIES = frozenset(
    {
        MetadataCategory.I_ARXIU_EXP,
        MetadataCategory.I_ARXIU_VOC_EXP,
        MetadataCategory.I_ARXIU_VOC_UPF,
    }
)


class SectionKind(str, Enum):
    DOCUMENT = "document"
    EXPEDIENT = "expedient"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Classification:
    """Outcome of classifying a metadata section.

    Attributes:
        kind: Document, expedient or unknown
        confident: False when the kind was assigned by default rather than
            recognized from the declared type
    """

    kind: SectionKind
    confident: bool


def informative_type(declared_type: str | None, declared_other_type: str | None) -> str | None:
    """The declared type string worth keeping after normalization.

    OTHERMDTYPE when present, otherwise MDTYPE unless it is the bare OTHER.
    """
    if declared_other_type and declared_other_type.strip():
        return declared_other_type
    if declared_type and declared_type.strip():
        if registry.match(declared_type) is not MetadataCategory.OTHER:
            return declared_type
    return None


def classify_section(declared_type: str | None, declared_other_type: str | None) -> Classification:
    """Decide whether a section describes a document or an expedient.

    Args:
        declared_type: MDTYPE of the section
        declared_other_type: OTHERMDTYPE of the section

    Returns:
        DOCUMENT or EXPEDIENT when either declared type is recognized;
        EXPEDIENT (not confident) for any other informative type; UNKNOWN
        when nothing informative was declared
    """
    for raw in (declared_type, declared_other_type):
        category = registry.match(raw)
        if category in DOCUMENT_CATEGORIES:
            return Classification(SectionKind.DOCUMENT, confident=True)
        if category in EXPEDIENT_CATEGORIES:
            return Classification(SectionKind.EXPEDIENT, confident=True)

    if informative_type(declared_type, declared_other_type) is not None:
        return Classification(SectionKind.EXPEDIENT, confident=False)
    return Classification(SectionKind.UNKNOWN, confident=False)


def normalized_type(
    classification: Classification,
    declared_type: str | None,
    declared_other_type: str | None,
) -> MetadataType:
    """Normalized metadata type for a classified section.

    Raises:
        ValueError: If the section was not classified
    """
    if classification.kind is SectionKind.DOCUMENT:
        category = MetadataCategory.I_ARXIU_DOC
    elif classification.kind is SectionKind.EXPEDIENT:
        category = MetadataCategory.I_ARXIU_EXP
    else:
        raise ValueError("Cannot normalize an unclassified metadata section")
    return MetadataType(
        category=category,
        other_value=informative_type(declared_type, declared_other_type),
    )
