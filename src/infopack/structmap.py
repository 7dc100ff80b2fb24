"""Locate the zones of a package in its structural map."""

import logging
from dataclasses import dataclass, field

from schemas import codes
from schemas.mets import Div, FileEntry, FileGroup, IndexTarget, MetsDocument, StructMap
from schemas.report import ValidationReport

from .constants import REPRESENTATIONS_FOLDER
from .profiles import Profile, Zone

logger = logging.getLogger(__name__)


@dataclass
class ZoneMap:
    """Zones found in a structural map.

    Attributes:
        struct_map: The structural map that was used, None if none matched
        main_div: Root div of that structural map
        zones: Zone -> div holding the zone's pointers
    """

    struct_map: StructMap | None = None
    main_div: Div | None = None
    zones: dict[Zone, Div] = field(default_factory=dict)

    def get(self, zone: Zone) -> Div | None:
        return self.zones.get(zone)

    def __contains__(self, zone: Zone) -> bool:
        return zone in self.zones

    @property
    def found(self) -> bool:
        return self.main_div is not None


class StructMapWalker:
    """Classify structural map divs into zones for a profile.

    One walker serves every profile: the profile supplies the accepted
    structural map names and the zone label tables, and switches on the
    representation search used by legacy packages.
    """

    def __init__(self, profile: Profile, report: ValidationReport):
        self.profile = profile
        self.report = report

    def select_struct_map(self, document: MetsDocument, is_main: bool = True) -> StructMap | None:
        """Pick the structural map recognized by the profile.

        Records an ERROR when none matches and a WARN when several do.
        """
        matches = [
            sm
            for sm in document.struct_maps
            if self.profile.accepts_struct_map(sm.id, sm.label)
        ]
        if not matches:
            self.report.error(
                codes.MAIN_METS_HAS_NO_STRUCT_MAP
                if is_main
                else codes.REPRESENTATION_METS_HAS_NO_STRUCT_MAP,
                source=f"mets[OBJID={document.objid!r}]",
            )
            return None
        if len(matches) > 1:
            self.report.warn(
                codes.MAIN_METS_MULTIPLE_STRUCT_MAPS,
                f"{len(matches)} recognized structural maps; using the first",
                source=f"mets[OBJID={document.objid!r}]",
            )
        return matches[0]

    def classify(self, document: MetsDocument, is_main: bool = True) -> ZoneMap:
        """Build the zone map of a document.

        Args:
            document: The description document
            is_main: Whether this is the package-level document

        Returns:
            ZoneMap; empty when no structural map is recognized
        """
        struct_map = self.select_struct_map(document, is_main)
        if struct_map is None or struct_map.div is None:
            if struct_map is not None:
                self.report.error(
                    codes.MAIN_METS_HAS_NO_STRUCT_MAP
                    if is_main
                    else codes.REPRESENTATION_METS_HAS_NO_STRUCT_MAP,
                    "Structural map has no root div",
                )
            return ZoneMap(struct_map=struct_map)

        zone_map = ZoneMap(struct_map=struct_map, main_div=struct_map.div)
        unclaimed: list[Div] = []
        for child in struct_map.div.divs:
            if self.profile.is_metadata_label(child.label):
                self._classify_metadata(child, zone_map)
                continue
            zone = self.profile.zone_for(child.label) or self.profile.metadata_zone_for(child.label)
            if zone is None:
                unclaimed.append(child)
            elif zone in zone_map.zones:
                logger.debug(f"Ignoring repeated {zone.value} zone {child.describe()}")
            else:
                zone_map.zones[zone] = child

        if self.profile.search_representations and is_main:
            index = document.index()
            found = [div for div in unclaimed if self._is_representation_div(div, index)]
            if found:
                zone_map.zones[Zone.REPRESENTATIONS] = Div(
                    label=REPRESENTATIONS_FOLDER, divs=found
                )
        elif unclaimed:
            logger.debug(
                f"Unrecognized divs: {', '.join(d.describe() for d in unclaimed)}"
            )

        logger.debug(
            f"Zones found: {', '.join(z.value for z in zone_map.zones) or 'none'}"
        )
        return zone_map

    def _classify_metadata(self, metadata_div: Div, zone_map: ZoneMap) -> None:
        """Map the children of a metadata div onto metadata zones.

        A metadata div without zone children but with DMDID/ADMID links is
        split into a descriptive zone (DMDID) and a preservation zone (ADMID).
        """
        for sub in metadata_div.divs:
            zone = self.profile.metadata_zone_for(sub.label)
            if zone is not None and zone not in zone_map.zones:
                zone_map.zones[zone] = sub

        if not metadata_div.divs:
            if metadata_div.dmd_ids and Zone.DESCRIPTIVE not in zone_map.zones:
                zone_map.zones[Zone.DESCRIPTIVE] = Div(
                    label="descriptive", dmd_ids=list(metadata_div.dmd_ids)
                )
            if metadata_div.adm_ids and Zone.PRESERVATION not in zone_map.zones:
                zone_map.zones[Zone.PRESERVATION] = Div(
                    label="preservation", adm_ids=list(metadata_div.adm_ids)
                )

    @staticmethod
    def _points_at_files(div: Div, index: dict[str, IndexTarget]) -> bool:
        return any(
            isinstance(index.get(pointer.file_id), (FileEntry, FileGroup))
            for pointer in div.file_pointers
        )

    def _is_representation_div(self, div: Div, index: dict[str, IndexTarget]) -> bool:
        """A div is a representation if it, or a same-labelled child, points at files."""
        if self._points_at_files(div, index):
            return True
        label = (div.label or "").strip().lower()
        return any(
            (child.label or "").strip().lower() == label and self._points_at_files(child, index)
            for child in div.divs
        )
