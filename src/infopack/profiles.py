"""Package profiles.

A profile tells the struct map walker how to recognize the structural map and
its zones. The common profile uses fixed zone labels; the legacy (iArxiu)
profile additionally discovers representations by searching for divs that
point at files.
"""

from dataclasses import dataclass, field
from enum import Enum

from schemas.vocabulary import ContentCategory

from .constants import (
    ANCESTORS_LABEL,
    COMMON_SPEC_STRUCTURAL_MAP,
    DATA_FOLDER,
    DESCRIPTIVE_FOLDER,
    DOCUMENTATION_FOLDER,
    E_ARK_STRUCTURAL_MAP,
    METADATA_FOLDER,
    OTHER_FOLDER,
    PRESERVATION_FOLDER,
    REPRESENTATIONS_FOLDER,
    SCHEMAS_FOLDER,
    SUBMISSION_FOLDER,
)


class Zone(str, Enum):
    DESCRIPTIVE = "descriptive"
    PRESERVATION = "preservation"
    OTHER = "other"
    REPRESENTATIONS = "representations"
    DATA = "data"
    SCHEMAS = "schemas"
    DOCUMENTATION = "documentation"
    SUBMISSION = "submission"
    ANCESTORS = "ancestors"


METADATA_ZONES = (Zone.DESCRIPTIVE, Zone.PRESERVATION, Zone.OTHER)


@dataclass(frozen=True)
class Profile:
    """How a family of packages lays out its structural map.

    Attributes:
        name: Profile name ("eark" or "iarxiu")
        struct_map_labels: Accepted structMap LABEL values (case-insensitive)
        struct_map_ids: Accepted structMap ID values (case-insensitive)
        zone_labels: First-level div label -> zone
        metadata_label: Label of the div grouping the metadata zones
        metadata_zone_labels: Label under the metadata div -> zone
        search_representations: Discover representations by file pointers
        classify_metadata: Descriptive sections are classified as documents or
            expedients (legacy inline metadata)
        default_content_type: Content type used when TYPE is not recognized
    """

    name: str
    struct_map_labels: tuple[str, ...] = ()
    struct_map_ids: tuple[str, ...] = ()
    zone_labels: dict[str, Zone] = field(default_factory=dict)
    metadata_label: str = METADATA_FOLDER
    metadata_zone_labels: dict[str, Zone] = field(default_factory=dict)
    search_representations: bool = False
    classify_metadata: bool = False
    default_content_type: ContentCategory = ContentCategory.OTHER

    def accepts_struct_map(self, struct_map_id: str | None, label: str | None) -> bool:
        if label and label.strip().lower() in (v.lower() for v in self.struct_map_labels):
            return True
        if struct_map_id and struct_map_id.strip().lower() in (
            v.lower() for v in self.struct_map_ids
        ):
            return True
        return False

    def zone_for(self, label: str | None) -> Zone | None:
        if not label:
            return None
        return self.zone_labels.get(label.strip().lower())

    def metadata_zone_for(self, label: str | None) -> Zone | None:
        if not label:
            return None
        return self.metadata_zone_labels.get(label.strip().lower())

    def is_metadata_label(self, label: str | None) -> bool:
        return bool(label) and label.strip().lower() == self.metadata_label


_ZONE_LABELS = {
    REPRESENTATIONS_FOLDER: Zone.REPRESENTATIONS,
    DATA_FOLDER: Zone.DATA,
    SCHEMAS_FOLDER: Zone.SCHEMAS,
    DOCUMENTATION_FOLDER: Zone.DOCUMENTATION,
    SUBMISSION_FOLDER: Zone.SUBMISSION,
    ANCESTORS_LABEL: Zone.ANCESTORS,
}

_METADATA_ZONE_LABELS = {
    DESCRIPTIVE_FOLDER: Zone.DESCRIPTIVE,
    PRESERVATION_FOLDER: Zone.PRESERVATION,
    OTHER_FOLDER: Zone.OTHER,
}

COMMON = Profile(
    name="eark",
    struct_map_labels=(COMMON_SPEC_STRUCTURAL_MAP, E_ARK_STRUCTURAL_MAP),
    zone_labels=dict(_ZONE_LABELS),
    metadata_zone_labels=dict(_METADATA_ZONE_LABELS),
    default_content_type=ContentCategory.OTHER,
)

LEGACY = Profile(
    name="iarxiu",
    struct_map_labels=(COMMON_SPEC_STRUCTURAL_MAP, E_ARK_STRUCTURAL_MAP),
    struct_map_ids=("structmap", "physical", "common-specification-structural-map"),
    zone_labels={
        label: zone
        for label, zone in _ZONE_LABELS.items()
        if zone is not Zone.REPRESENTATIONS
    },
    metadata_zone_labels=dict(_METADATA_ZONE_LABELS),
    search_representations=True,
    classify_metadata=True,
    default_content_type=ContentCategory.PL_EXPEDIENT,
)

PROFILES = {COMMON.name: COMMON, LEGACY.name: LEGACY}


def get_profile(name: str) -> Profile:
    """Look up a profile by name.

    Raises:
        ValueError: If the profile name is unknown
    """
    try:
        return PROFILES[name.strip().lower()]
    except KeyError:
        raise ValueError(
            f"Unknown profile {name!r} (expected one of: {', '.join(sorted(PROFILES))})"
        ) from None
