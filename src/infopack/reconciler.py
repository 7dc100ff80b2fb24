"""Build Representation objects from the representations zone."""

import logging
from pathlib import Path

from schemas import codes
from schemas.mets import Div, IndexTarget, MetadataSection, MetsDocument
from schemas.package import (
    DescriptiveMetadata,
    MetadataRecord,
    PreservationMetadata,
    Representation,
)

from . import registry
from .checksum import verify
from .constants import DATA_FOLDER, METADATA_FOLDER
from .context import ParseContext
from .exceptions import IntegrityError, MetsReadError
from .header import agents_from_header, parse_representation_type
from .href import relative_path_from_href, resolve_under
from .profiles import METADATA_ZONES, Zone
from .resolvers.files import FileResolver, FileTarget, expand_pointer
from .resolvers.metadata import MetadataResolver
from .structmap import StructMapWalker

logger = logging.getLogger(__name__)


class RepresentationReconciler:
    """Reconcile each representation div with the files and metadata it names.

    A representation is either described by its own METS document (reached
    through an ``mptr``) or, in legacy packages, inline in the package
    document. Items that cannot be resolved are reported and left out; the
    representation itself is always kept.
    """

    def __init__(
        self,
        context: ParseContext,
        file_resolver: FileResolver,
        metadata_resolver: MetadataResolver,
        walker: StructMapWalker,
    ):
        self.context = context
        self.file_resolver = file_resolver
        self.metadata_resolver = metadata_resolver
        self.walker = walker

    def reconcile(
        self,
        zone_div: Div,
        index: dict[str, IndexTarget],
        base_path: Path,
    ) -> list[Representation]:
        """Reconcile every child of the representations zone, in order.

        Raises:
            OperationCancelled: If cancellation is requested between
                representations
        """
        listener = self.context.listener
        representations: list[Representation] = []
        seen_ids: set[str] = set()

        listener.representations_started(len(zone_div.divs))
        for position, div in enumerate(zone_div.divs, start=1):
            self.context.check_cancelled()
            representation = self.reconcile_one(div, index, base_path, position)

            if representation.representation_id in seen_ids:
                self.context.report.warn(
                    codes.REPRESENTATION_DUPLICATE_ID,
                    f"Representation id {representation.representation_id!r} is used more than once",
                    source=div.describe(),
                )
            seen_ids.add(representation.representation_id)
            representations.append(representation)
            listener.representation_ended(representation)
        listener.representations_ended()
        return representations

    def reconcile_one(
        self,
        div: Div,
        index: dict[str, IndexTarget],
        base_path: Path,
        position: int,
    ) -> Representation:
        label = (div.label or "").strip() or None
        self.context.listener.representation_started(label or f"rep{position}")
        if div.mets_pointers:
            representation = self._from_nested_document(div, index, base_path, label, position)
        else:
            representation = self._from_inline_div(div, index, base_path, label, position)

        if not representation.data:
            self.context.report.warn(
                codes.REPRESENTATION_HAS_NO_FILES,
                source=f"representation[{representation.representation_id}]",
            )
        if not representation.has_metadata:
            self.context.report.warn(
                codes.REPRESENTATION_HAS_NO_METADATA,
                source=f"representation[{representation.representation_id}]",
            )
        logger.info(
            f"Representation {representation.representation_id}: "
            f"{len(representation.data)} data file(s)"
        )
        return representation

    def _from_nested_document(
        self,
        div: Div,
        index: dict[str, IndexTarget],
        base_path: Path,
        label: str | None,
        position: int,
    ) -> Representation:
        """Read a representation described by its own METS document."""
        report = self.context.report
        href = div.mets_pointers[0].href
        fallback_id = label or f"rep{position}"

        relative = relative_path_from_href(href, self.context.settings.encode_href)
        mets_path = resolve_under(base_path, relative) if relative else None
        if mets_path is None or not mets_path.is_file():
            report.error(
                codes.REPRESENTATION_METS_FILE_NOT_FOUND,
                source=div.describe(),
                path=relative or href,
            )
            return Representation(representation_id=fallback_id)
        report.info(codes.REPRESENTATION_METS_FILE_FOUND, path=relative)
        self._verify_document_checksum(div, index, mets_path, relative)

        try:
            document = self.context.reader.read(mets_path)
        except MetsReadError as e:
            report.error(
                codes.REPRESENTATION_METS_NOT_VALID,
                source=div.describe(),
                path=relative,
                cause=e,
            )
            return Representation(representation_id=fallback_id)
        report.info(codes.REPRESENTATION_METS_IS_VALID, path=relative)

        return self._read_document(document, mets_path.parent, label or document.objid or fallback_id)

    def _verify_document_checksum(
        self,
        div: Div,
        index: dict[str, IndexTarget],
        mets_path: Path,
        relative: str,
    ) -> None:
        """Verify the nested document against a fileSec entry, if one is linked."""
        for pointer in div.file_pointers:
            target = expand_pointer(pointer, index)
            if not isinstance(target, FileTarget) or not target.entry.checksum:
                continue
            try:
                verify(
                    mets_path,
                    target.entry.checksum_type,
                    target.entry.checksum,
                    self.context.settings.chunk_size,
                )
            except IntegrityError as e:
                self.context.report.error(
                    codes.FILE_CHECKSUM_MISMATCH,
                    source=div.describe(),
                    path=relative,
                    cause=e,
                )

    def _read_document(
        self,
        document: MetsDocument,
        rep_base: Path,
        representation_id: str,
    ) -> Representation:
        zone_map = self.walker.classify(document, is_main=False)
        doc_index = document.index()
        status = registry.parse_representation_status(
            zone_map.main_div.type if zone_map.main_div is not None else None
        )
        content_type = parse_representation_type(
            document.type,
            self.context.report,
            self.context.settings.require_representation_type_parts,
        )

        representation = Representation(
            representation_id=representation_id,
            object_id=document.objid or representation_id,
            description=document.label,
            content_type=content_type,
            status=status,
            agents=agents_from_header(document.header),
        )

        for zone in METADATA_ZONES:
            div = zone_map.get(zone)
            if div is None:
                continue
            records = self.metadata_resolver.resolve_zone(
                div, doc_index, rep_base, zone, rep_base / METADATA_FOLDER / zone.value
            )
            attach_metadata(representation, zone, records)

        file_zones = (
            (Zone.DATA, "data", rep_base / DATA_FOLDER),
            (Zone.SCHEMAS, "schemas", rep_base / Zone.SCHEMAS.value),
            (Zone.DOCUMENTATION, "documentation", rep_base / Zone.DOCUMENTATION.value),
        )
        for zone, attribute, zone_root in file_zones:
            div = zone_map.get(zone)
            if div is None:
                continue
            files = self.file_resolver.resolve_zone(div, doc_index, rep_base, zone, zone_root)
            getattr(representation, attribute).extend(files)

        return representation

    def _from_inline_div(
        self,
        div: Div,
        index: dict[str, IndexTarget],
        base_path: Path,
        label: str | None,
        position: int,
    ) -> Representation:
        """Read a representation described inline in the package document.

        Data files are relative to the package base; descriptive sections
        come from the DMDID links of the div and its children.
        """
        representation = Representation(representation_id=label or f"rep{position}")

        section_ids = _collect_dmd_ids(div)
        if self.context.profile.classify_metadata:
            records = self.metadata_resolver.resolve_legacy_sections(
                section_ids, index, base_path, source=div.describe()
            )
        else:
            records = []
            zone_root = base_path / METADATA_FOLDER / Zone.DESCRIPTIVE.value
            for section_id in section_ids:
                section = index.get(section_id)
                if not isinstance(section, MetadataSection):
                    self.context.report.error(
                        codes.METADATA_REFERENCE_UNRESOLVED,
                        f"No metadata section with ID {section_id!r}",
                        source=div.describe(),
                    )
                    continue
                record = self.metadata_resolver.resolve_section(
                    section, base_path, Zone.DESCRIPTIVE, zone_root
                )
                if record is not None:
                    records.append(record)
        attach_metadata(representation, Zone.DESCRIPTIVE, records)

        representation.data.extend(
            self.file_resolver.resolve_zone(div, index, base_path, Zone.DATA, base_path)
        )
        return representation


def _collect_dmd_ids(div: Div) -> list[str]:
    """DMDID links of a div and its descendants, without duplicates."""
    ids: list[str] = []
    pending = [div]
    while pending:
        current = pending.pop(0)
        for section_id in current.dmd_ids:
            if section_id not in ids:
                ids.append(section_id)
        pending.extend(current.divs)
    return ids


def attach_metadata(
    target,
    zone: Zone,
    records: list[MetadataRecord],
) -> None:
    """Append records to the matching metadata list of a package or representation."""
    for record in records:
        if zone is Zone.DESCRIPTIVE and isinstance(record, DescriptiveMetadata):
            target.descriptive_metadata.append(record)
        elif zone is Zone.PRESERVATION and isinstance(record, PreservationMetadata):
            target.preservation_metadata.append(record)
        else:
            target.other_metadata.append(record)
