"""Resolve METS file references into IPFile values.

A struct map ``fptr`` names an ID that may belong to a single file, a file
group, or a metadata section. ``expand_pointer`` turns that ID into one tagged
target exactly once; everything downstream works on the tagged value.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Union

from schemas import codes
from schemas.mets import (
    Div,
    FileEntry,
    FileGroup,
    FilePointer,
    IndexTarget,
    MetadataSection,
)
from schemas.package import IPFile

from ..checksum import verify
from ..context import ParseContext
from ..exceptions import ChecksumMismatchError, UnknownAlgorithmError
from ..href import relative_folders, relative_path_from_href, resolve_under
from ..profiles import Zone

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileTarget:
    entry: FileEntry


@dataclass(frozen=True)
class GroupTarget:
    group: FileGroup


@dataclass(frozen=True)
class MetadataTarget:
    section: MetadataSection


@dataclass(frozen=True)
class Unresolved:
    file_id: str


PointerTarget = Union[FileTarget, GroupTarget, MetadataTarget, Unresolved]


def expand_pointer(pointer: FilePointer, index: dict[str, IndexTarget]) -> PointerTarget:
    """Classify the target of a file pointer."""
    target = index.get(pointer.file_id)
    if isinstance(target, FileEntry):
        return FileTarget(target)
    if isinstance(target, FileGroup):
        return GroupTarget(target)
    if isinstance(target, MetadataSection):
        return MetadataTarget(target)
    return Unresolved(pointer.file_id)


def files_for_target(target: PointerTarget) -> list[FileEntry]:
    """File entries behind a target; groups are flattened recursively."""
    if isinstance(target, FileTarget):
        return [target.entry]
    if isinstance(target, GroupTarget):
        return target.group.all_files()
    return []


def collect_pointers(div: Div) -> list[FilePointer]:
    """File pointers of a div and all its descendants, in document order."""
    pointers = list(div.file_pointers)
    for child in div.divs:
        pointers.extend(collect_pointers(child))
    return pointers


@dataclass(frozen=True)
class ZoneCodes:
    found: str
    not_found: str


ZONE_CODES: dict[Zone, ZoneCodes] = {
    Zone.DATA: ZoneCodes(
        codes.REPRESENTATION_FILE_FOUND_WITH_MATCHING_CHECKSUMS,
        codes.REPRESENTATION_FILE_NOT_FOUND,
    ),
    Zone.SCHEMAS: ZoneCodes(
        codes.SCHEMA_FILE_FOUND_WITH_MATCHING_CHECKSUMS,
        codes.SCHEMA_FILE_NOT_FOUND,
    ),
    Zone.DOCUMENTATION: ZoneCodes(
        codes.DOCUMENTATION_FILE_FOUND_WITH_MATCHING_CHECKSUMS,
        codes.DOCUMENTATION_FILE_NOT_FOUND,
    ),
    Zone.SUBMISSION: ZoneCodes(
        codes.SUBMISSION_FILE_FOUND_WITH_MATCHING_CHECKSUMS,
        codes.SUBMISSION_FILE_NOT_FOUND,
    ),
    Zone.DESCRIPTIVE: ZoneCodes(
        codes.DESCRIPTIVE_METADATA_FOUND_WITH_MATCHING_CHECKSUMS,
        codes.DESCRIPTIVE_METADATA_FILE_NOT_FOUND,
    ),
    Zone.PRESERVATION: ZoneCodes(
        codes.PRESERVATION_METADATA_FOUND_WITH_MATCHING_CHECKSUMS,
        codes.PRESERVATION_METADATA_FILE_NOT_FOUND,
    ),
    Zone.OTHER: ZoneCodes(
        codes.OTHER_METADATA_FOUND_WITH_MATCHING_CHECKSUMS,
        codes.OTHER_METADATA_FILE_NOT_FOUND,
    ),
}


class FileResolver:
    """Locate and verify the files a description document refers to.

    Missing or corrupt files are recorded in the report and skipped; the
    resolver never raises for them.
    """

    def __init__(self, context: ParseContext, package_root: Path | None = None):
        self.context = context
        self.package_root = package_root

    def _display(self, path: Path) -> str:
        if self.package_root is not None:
            try:
                return path.relative_to(self.package_root).as_posix()
            except ValueError:
                pass
        return str(path)

    def resolve(
        self,
        base_path: Path,
        href: str | None,
        zone: Zone,
        zone_root: Path,
        checksum: str | None = None,
        checksum_type: str | None = None,
        mimetype: str | None = None,
        size: int | None = None,
        created: datetime | None = None,
        source: str | None = None,
    ) -> IPFile | None:
        """Resolve one href relative to base_path.

        Args:
            base_path: Directory the href is relative to
            href: xlink:href value
            zone: Zone the file belongs to (selects the report codes)
            zone_root: Directory relative folders are computed from
            checksum: Declared checksum, verified when present
            checksum_type: Declared checksum algorithm
            mimetype: Declared MIME type
            size: Declared size
            created: Declared creation timestamp
            source: Description of the referencing node, for the report

        Returns:
            The IPFile, or None when the file is missing or fails verification
        """
        self.context.check_cancelled()
        report = self.context.report
        zone_codes = ZONE_CODES[zone]

        relative = relative_path_from_href(href, self.context.settings.encode_href)
        if relative is None:
            report.error(
                zone_codes.not_found,
                f"Invalid or unsafe href {href!r}",
                source=source,
                path=href,
            )
            return None

        file_path = resolve_under(base_path, relative)
        display = self._display(file_path)
        if not file_path.is_file():
            report.error(zone_codes.not_found, source=source, path=display)
            logger.warning(f"File not found: {display}")
            return None

        if checksum:
            try:
                verify(file_path, checksum_type, checksum, self.context.settings.chunk_size)
            except ChecksumMismatchError as e:
                report.error(
                    codes.FILE_CHECKSUM_MISMATCH,
                    f"Checksum in METS.xml doesn't match real checksum "
                    f"(expected {e.expected}, computed {e.actual})",
                    source=source,
                    path=display,
                    cause=e,
                )
                return None
            except UnknownAlgorithmError as e:
                report.error(
                    codes.FILE_CHECKSUM_ALGORITHM_UNKNOWN,
                    source=source,
                    path=display,
                    cause=e,
                )
                return None
            except OSError as e:
                report.error(
                    codes.FILE_CHECKSUM_NOT_COMPUTABLE,
                    source=source,
                    path=display,
                    cause=e,
                )
                return None

        report.info(zone_codes.found, source=source, path=display)
        return IPFile(
            path=file_path,
            relative_folders=relative_folders(zone_root, file_path),
            checksum=checksum or None,
            checksum_algorithm=checksum_type if checksum else None,
            mimetype=mimetype,
            size=size,
            created=created,
        )

    def resolve_entry(
        self,
        entry: FileEntry,
        base_path: Path,
        zone: Zone,
        zone_root: Path,
    ) -> IPFile | None:
        """Resolve a fileSec entry through its first FLocat."""
        source = f"file[ID={entry.id!r}]"
        if not entry.locations:
            self.context.report.error(codes.FILE_HAS_NO_FLOCAT, source=source)
            return None
        return self.resolve(
            base_path,
            entry.href,
            zone,
            zone_root,
            checksum=entry.checksum,
            checksum_type=entry.checksum_type,
            mimetype=entry.mimetype,
            size=entry.size,
            created=entry.created,
            source=source,
        )

    def resolve_zone(
        self,
        div: Div,
        index: dict[str, IndexTarget],
        base_path: Path,
        zone: Zone,
        zone_root: Path,
    ) -> list[IPFile]:
        """Resolve every file pointed to from a zone div and its descendants."""
        files = []
        for pointer in collect_pointers(div):
            target = expand_pointer(pointer, index)
            if isinstance(target, Unresolved):
                self.context.report.error(
                    codes.FILE_POINTER_UNRESOLVED,
                    f"No file or file group with ID {target.file_id!r}",
                    source=div.describe(),
                )
                continue
            if isinstance(target, MetadataTarget):
                self.context.report.error(
                    codes.FILE_POINTER_NOT_A_FILE,
                    f"{target.section.id!r} is a metadata section",
                    source=div.describe(),
                )
                continue
            for entry in files_for_target(target):
                resolved = self.resolve_entry(entry, base_path, zone, zone_root)
                if resolved is not None:
                    files.append(resolved)
        logger.debug(f"Resolved {len(files)} file(s) in {zone.value} zone")
        return files
