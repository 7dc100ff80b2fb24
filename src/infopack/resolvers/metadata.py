"""Resolve metadata sections into metadata records."""

import logging
import mimetypes
import re
from datetime import datetime
from pathlib import Path

from schemas import codes
from schemas.mets import Div, IndexTarget, MetadataReference, MetadataSection
from schemas.package import (
    DescriptiveMetadata,
    IPFile,
    MetadataRecord,
    PreservationMetadata,
)
from schemas.vocabulary import MetadataCategory, MetadataType

from .. import registry
from ..constants import DESCRIPTIVE_FOLDER, METADATA_FOLDER
from ..context import ParseContext
from ..href import encode_href
from ..profiles import Zone
from .classification import Classification, SectionKind, classify_section, normalized_type
from .files import (
    FileResolver,
    MetadataTarget,
    Unresolved,
    collect_pointers,
    expand_pointer,
    files_for_target,
)

logger = logging.getLogger(__name__)

_EXTENSIONS = {
    "text/xml": ".xml",
    "application/xml": ".xml",
    "application/json": ".json",
    "text/plain": ".txt",
    "application/pdf": ".pdf",
}


def extension_for(mimetype: str | None) -> str:
    """File extension for externalized inline content (default .xml)."""
    if not mimetype:
        return ".xml"
    key = mimetype.split(";")[0].strip().lower()
    if key in _EXTENSIONS:
        return _EXTENSIONS[key]
    if key.endswith("+xml"):
        return ".xml"
    return mimetypes.guess_extension(key) or ".xml"


def _safe_name(identifier: str) -> str:
    return re.sub(r"[^A-Za-z0-9._-]", "_", identifier) or "metadata"


class MetadataResolver:
    """Turn metadata sections into descriptive, preservation and other records.

    Each section is resolved at most once per resolver; a section reached
    through several pointers yields a single record.
    """

    def __init__(self, context: ParseContext, file_resolver: FileResolver):
        self.context = context
        self.file_resolver = file_resolver
        self._seen: set[tuple[str, str]] = set()

    def resolve_zone(
        self,
        div: Div,
        index: dict[str, IndexTarget],
        base_path: Path,
        zone: Zone,
        zone_root: Path,
    ) -> list[MetadataRecord]:
        """Resolve every metadata section pointed to from a metadata zone.

        Sections are reached through ``fptr`` FILEIDs and, for descriptive
        zones, DMDID (ADMID for the others) attributes of the zone div.
        """
        records: list[MetadataRecord] = []
        report = self.context.report
        pointers = collect_pointers(div)
        linked_ids = div.dmd_ids if zone is Zone.DESCRIPTIVE else div.adm_ids

        if not pointers and not linked_ids:
            report.warn(codes.METADATA_ZONE_EMPTY, source=div.describe())
            return records

        for pointer in pointers:
            target = expand_pointer(pointer, index)
            if isinstance(target, Unresolved):
                report.error(
                    codes.METADATA_REFERENCE_UNRESOLVED,
                    f"No metadata section with ID {target.file_id!r}",
                    source=div.describe(),
                )
            elif isinstance(target, MetadataTarget):
                record = self.resolve_section(target.section, base_path, zone, zone_root)
                if record is not None:
                    records.append(record)
            else:
                for entry in files_for_target(target):
                    file = self.file_resolver.resolve_entry(entry, base_path, zone, zone_root)
                    if file is not None:
                        records.append(self._make_record(entry.id, file, zone, None, None))

        for section_id in linked_ids:
            section = index.get(section_id)
            if not isinstance(section, MetadataSection):
                report.error(
                    codes.METADATA_REFERENCE_UNRESOLVED,
                    f"No metadata section with ID {section_id!r}",
                    source=div.describe(),
                )
                continue
            record = self.resolve_section(section, base_path, zone, zone_root)
            if record is not None:
                records.append(record)

        logger.debug(f"Resolved {len(records)} {zone.value} metadata record(s)")
        return records

    def resolve_section(
        self,
        section: MetadataSection,
        base_path: Path,
        zone: Zone,
        zone_root: Path,
        metadata_type: MetadataType | None = None,
    ) -> MetadataRecord | None:
        """Resolve a single metadata section.

        Args:
            section: The dmdSec/amdSec child
            base_path: Directory mdRef hrefs are relative to
            zone: Metadata zone the record belongs to
            zone_root: Directory relative folders are computed from
            metadata_type: Type to record instead of the declared one

        Returns:
            The record, or None if the section was already resolved or its
            content is missing
        """
        key = (str(base_path), section.id)
        if section.id and key in self._seen:
            logger.debug(f"Skipping already resolved section {section.id}")
            return None
        self._seen.add(key)

        source = f"{section.kind}[ID={section.id!r}]"
        reference = section.reference
        if reference is None and section.wrap is not None:
            reference = self.externalize(section, zone)
            if reference is None:
                return None
            base_path = self.context.ensure_work_dir()
            zone_root = base_path / METADATA_FOLDER / zone.value
        elif reference is None:
            self.context.report.error(codes.METADATA_SECTION_HAS_NO_REFERENCE, source=source)
            return None

        file = self.file_resolver.resolve(
            base_path,
            reference.href,
            zone,
            zone_root,
            checksum=reference.checksum,
            checksum_type=reference.checksum_type,
            mimetype=reference.mimetype,
            size=reference.size,
            created=reference.created,
            source=source,
        )
        if file is None:
            return None

        if metadata_type is None:
            metadata_type = registry.resolve_declared(reference.mdtype, reference.other_mdtype)
        return self._make_record(
            section.id,
            file,
            zone,
            metadata_type,
            reference.mdtype_version,
            created=section.created or reference.created,
        )

    def _make_record(
        self,
        record_id: str,
        file: IPFile,
        zone: Zone,
        metadata_type: MetadataType | None,
        version: str | None,
        created: datetime | None = None,
    ) -> MetadataRecord:
        if zone is Zone.DESCRIPTIVE:
            metadata_type = metadata_type or MetadataType(other_value="")
            if metadata_type.category is MetadataCategory.OTHER:
                self.context.report.warn(
                    codes.UNKNOWN_DESCRIPTIVE_METADATA_TYPE,
                    f"Descriptive metadata type {metadata_type.as_canonical_string()!r} "
                    f"is not recognized",
                    source=record_id,
                )
            return DescriptiveMetadata(
                id=record_id,
                file=file,
                metadata_type=metadata_type,
                metadata_version=version,
                created=created,
            )
        if zone is Zone.PRESERVATION:
            if metadata_type is None or metadata_type.as_canonical_string() == "":
                metadata_type = MetadataType(category=MetadataCategory.PREMIS)
            return PreservationMetadata(
                id=record_id, file=file, metadata_type=metadata_type, created=created
            )
        return MetadataRecord(
            id=record_id,
            file=file,
            metadata_type=metadata_type or MetadataType(other_value=""),
            created=created,
        )

    def externalize(self, section: MetadataSection, zone: Zone = Zone.DESCRIPTIVE) -> MetadataReference | None:
        """Write an inline (mdWrap) section to a file in the work directory.

        Returns:
            A reference to the written file, or None if the section is empty
        """
        wrap = section.wrap
        source = f"{section.kind}[ID={section.id!r}]"
        content = wrap.content if wrap is not None else None
        if not content:
            self.context.report.error(codes.METADATA_SECTION_HAS_NO_CONTENT, source=source)
            return None

        work_dir = self.context.ensure_work_dir()
        relative = (
            f"{METADATA_FOLDER}/{zone.value}/"
            f"{_safe_name(section.id)}{extension_for(wrap.mimetype)}"
        )
        target = work_dir.joinpath(*relative.split("/"))
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)
        self.context.report.info(codes.METADATA_SECTION_EXTERNALIZED, source=source, path=relative)
        logger.debug(f"Externalized {section.id} to {target}")

        return MetadataReference(
            href=encode_href(relative, self.context.settings.encode_href),
            mdtype=wrap.mdtype,
            other_mdtype=wrap.other_mdtype,
            mdtype_version=wrap.mdtype_version,
            mimetype=wrap.mimetype,
            size=len(content),
            created=section.created,
        )

    def resolve_legacy_sections(
        self,
        section_ids: list[str],
        index: dict[str, IndexTarget],
        base_path: Path,
        source: str | None = None,
    ) -> list[DescriptiveMetadata]:
        """Classify and resolve legacy descriptive sections.

        Documents are resolved before expedients; each section is resolved
        exactly once and stored with its normalized type.
        """
        report = self.context.report
        documents: list[tuple[MetadataSection, Classification]] = []
        expedients: list[tuple[MetadataSection, Classification]] = []

        for section_id in section_ids:
            section = index.get(section_id)
            if not isinstance(section, MetadataSection):
                report.error(
                    codes.METADATA_REFERENCE_UNRESOLVED,
                    f"No metadata section with ID {section_id!r}",
                    source=source,
                )
                continue
            classification = classify_section(section.mdtype, section.other_mdtype)
            if classification.kind is SectionKind.DOCUMENT:
                documents.append((section, classification))
            elif classification.kind is SectionKind.EXPEDIENT:
                if not classification.confident:
                    report.warn(
                        codes.METADATA_SECTION_CLASSIFIED_BY_DEFAULT,
                        source=f"{section.kind}[ID={section.id!r}]",
                    )
                expedients.append((section, classification))
            else:
                report.warn(
                    codes.METADATA_SECTION_UNCLASSIFIED,
                    source=f"{section.kind}[ID={section.id!r}]",
                )

        zone_root = base_path / METADATA_FOLDER / DESCRIPTIVE_FOLDER
        records: list[DescriptiveMetadata] = []
        for section, classification in documents + expedients:
            metadata_type = normalized_type(classification, section.mdtype, section.other_mdtype)
            record = self.resolve_section(
                section, base_path, Zone.DESCRIPTIVE, zone_root, metadata_type=metadata_type
            )
            if record is not None:
                records.append(record)
        logger.debug(
            f"Resolved {len(documents)} document and {len(expedients)} expedient section(s)"
        )
        return records
