"""Build common-profile packages from the package object model.

The builder turns a Package into a list of container entries (the files to
copy plus the serialized METS documents) and hands them to a container
writer. Nothing is written to the output location unless the whole build
succeeds.
"""

import logging
import mimetypes
import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from schemas import codes
from schemas.mets import (
    Div,
    FileEntry,
    FileGroup,
    FileLocation,
    FilePointer,
    MetadataReference,
    MetadataSection,
    MetsDocument,
    MetsHeader,
    MetsPointer,
    StructMap,
)
from schemas.package import Agent, DescriptiveMetadata, IPFile, MetadataRecord, Package, Representation
from schemas.report import ValidationReport
from schemas.vocabulary import CreatorType, IPRole

from . import __version__, registry
from .cancellation import CancellationToken
from .checksum import compute_digest, digest_bytes
from .config import Settings
from .constants import (
    ANCESTORS_LABEL,
    COMMON_SPEC_STRUCTURAL_MAP,
    DATA_FOLDER,
    DEFAULT_MIMETYPE,
    DOCUMENTATION_FOLDER,
    METADATA_FOLDER,
    METS_FILE,
    REPRESENTATIONS_FOLDER,
    SCHEMAS_FOLDER,
    SUBMISSION_FOLDER,
)
from .container import ContainerEntry, DirectoryContainerWriter, ZipContainerWriter
from .header import agents_to_header, package_type, representation_type
from .href import encode_href
from .mets.writer import DEFAULT_SCHEMA_LOCATION, REPRESENTATION_SCHEMA_LOCATION, METSWriter
from .profiles import COMMON, Zone

logger = logging.getLogger(__name__)

_SECTION_KINDS = {
    Zone.DESCRIPTIVE: "dmdSec",
    Zone.PRESERVATION: "digiprovMD",
    Zone.OTHER: "techMD",
}

_UNSAFE_NAME = re.compile(r"[^A-Za-z0-9._-]+")


def new_id() -> str:
    """A fresh METS ID (an NCName)."""
    return f"uuid-{uuid.uuid4()}"


@dataclass
class BuildResult:
    """Outcome of a build.

    Attributes:
        path: The written zip file or directory; None if the build failed
        report: Everything noticed while building
        entries: Container entries that were (or would have been) written
    """

    path: Path | None
    report: ValidationReport
    entries: list[ContainerEntry] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.path is not None


@dataclass
class _FileFacts:
    mimetype: str
    size: int
    created: datetime
    checksum: str
    checksum_type: str


@dataclass
class _DocumentState:
    """Entries and IDs collected for one METS document."""

    prefix: str
    used_ids: set[str] = field(default_factory=set)
    sections: list[MetadataSection] = field(default_factory=list)
    file_groups: list[FileGroup] = field(default_factory=list)
    zone_divs: list[Div] = field(default_factory=list)

    def unique_id(self, candidate: str | None) -> str:
        if candidate and candidate not in self.used_ids:
            self.used_ids.add(candidate)
            return candidate
        generated = new_id()
        self.used_ids.add(generated)
        return generated


class PackageBuilder:
    """Write a Package as a common-profile information package.

    Metadata types are written with ``registry.mets_mdtype_attributes``; for
    categories outside the METS MDTYPE list only the category is kept, not
    its informative other value.

    Usage::

        builder = PackageBuilder(Settings())
        result = builder.build(package, Path("out"))
        if result.succeeded:
            print(result.path)
    """

    def __init__(
        self,
        settings: Settings | None = None,
        cancellation: CancellationToken | None = None,
    ):
        self.settings = settings or Settings()
        self.cancellation = cancellation or CancellationToken()

    def build(
        self,
        package: Package,
        destination: Path,
        name: str | None = None,
        as_zip: bool = True,
    ) -> BuildResult:
        """Build a package.

        Args:
            package: Package to write
            destination: Directory receiving the output
            name: Output name without extension (default: the package id)
            as_zip: Write a zip archive instead of a directory tree

        Returns:
            BuildResult; ``path`` is None when the report holds errors

        Raises:
            OperationCancelled: If cancellation is requested; no output is left
            BuildError: If the output path already exists
        """
        report = ValidationReport()
        entries: list[ContainerEntry] = []
        used_paths: set[str] = set()
        now = datetime.now(timezone.utc)

        if package.profile != COMMON.name:
            report.warn(
                codes.BUILD_PROFILE_IMPORT_ONLY,
                f"Package read with the {package.profile!r} profile is written as {COMMON.name!r}",
            )

        ids = list(package.ids) or [new_id()]
        logger.info(f"Building package {ids[0]} ({len(package.representations)} representation(s))")

        main = _DocumentState(prefix="")
        self._add_metadata(package, main, entries, used_paths, report)

        representations_div = Div(label=REPRESENTATIONS_FOLDER)
        representations_group = FileGroup(id=main.unique_id(None), use="Representations")
        seen_representations: set[str] = set()
        for representation in package.representations:
            self.cancellation.check()
            rep_id = representation.representation_id
            if not _is_valid_representation_id(rep_id) or rep_id in seen_representations:
                report.error(
                    codes.BUILD_INVALID_REPRESENTATION_ID,
                    f"Representation id {rep_id!r} is empty, repeated or not path-safe",
                )
                continue
            seen_representations.add(rep_id)
            self._add_representation(
                representation,
                main,
                representations_group,
                representations_div,
                entries,
                used_paths,
                report,
                now,
            )
        if representations_group.groups:
            main.file_groups.append(representations_group)
            main.zone_divs.append(representations_div)

        zones = [
            (Zone.SCHEMAS, SCHEMAS_FOLDER, "Schemas", package.schemas),
            (Zone.DOCUMENTATION, DOCUMENTATION_FOLDER, "Documentation", package.documentation),
        ]
        if package.submissions:
            if package.role is IPRole.AIP:
                zones.append((Zone.SUBMISSION, SUBMISSION_FOLDER, "Submission", package.submissions))
            else:
                report.warn(
                    codes.BUILD_SUBMISSION_NOT_ALLOWED,
                    f"{len(package.submissions)} submission file(s) left out of a {package.role.value}",
                )
        for zone, folder, use, files in zones:
            self._add_file_zone(files, folder, use, main, entries, used_paths, report)

        if package.ancestors:
            main.zone_divs.append(
                Div(
                    label=ANCESTORS_LABEL,
                    mets_pointers=[
                        MetsPointer(
                            href=encode_href(ancestor, self.settings.encode_href),
                            loctype="HANDLE",
                        )
                        for ancestor in package.ancestors
                    ],
                )
            )

        document = MetsDocument(
            objid=" ".join(ids),
            type=package_type(package.role, package.content_type),
            label=package.description,
            header=MetsHeader(
                create_date=package.create_date or now,
                last_mod_date=now,
                record_status=package.status.value,
                agents=agents_to_header(self._with_creator_agent(package.agents)),
            ),
            metadata_sections=main.sections,
            file_groups=main.file_groups,
            struct_maps=[self._struct_map(ids[0], None, main)],
        )
        entries.append(
            ContainerEntry(
                destination=METS_FILE,
                content=METSWriter(DEFAULT_SCHEMA_LOCATION).write(document),
                descriptor=document,
            )
        )

        if not report.is_valid():
            logger.error(f"Package {ids[0]} not written: {len(report.errors())} error(s)")
            return BuildResult(path=None, report=report, entries=entries)

        output_name = _safe_name(name or ids[0])
        if as_zip:
            writer = ZipContainerWriter(self.cancellation)
            target = Path(destination) / f"{output_name}.zip"
        else:
            writer = DirectoryContainerWriter(self.cancellation)
            target = Path(destination) / output_name
        path = writer.write(entries, target)
        report.info(codes.BUILD_COMPLETED, path=str(path))
        return BuildResult(path=path, report=report, entries=entries)

    def _with_creator_agent(self, agents: list[Agent]) -> list[Agent]:
        """Agents plus the software agent that built the package (once)."""
        name = self.settings.creator_agent_name
        if any(agent.name == name for agent in agents):
            return list(agents)
        return [
            *agents,
            Agent(
                name=name,
                role="CREATOR",
                type=CreatorType.OTHER,
                other_type="SOFTWARE",
                note=__version__,
            ),
        ]

    def _add_representation(
        self,
        representation: Representation,
        main: _DocumentState,
        representations_group: FileGroup,
        representations_div: Div,
        entries: list[ContainerEntry],
        used_paths: set[str],
        report: ValidationReport,
        now: datetime,
    ) -> None:
        """Add a representation's files and METS document to the entries."""
        rep_id = representation.representation_id
        rep_prefix = f"{REPRESENTATIONS_FOLDER}/{rep_id}/"
        state = _DocumentState(prefix=rep_prefix)

        self._add_metadata(representation, state, entries, used_paths, report)
        self._add_file_zone(representation.data, DATA_FOLDER, "Data", state, entries, used_paths, report)
        self._add_file_zone(
            representation.schemas, SCHEMAS_FOLDER, "Schemas", state, entries, used_paths, report
        )
        self._add_file_zone(
            representation.documentation,
            DOCUMENTATION_FOLDER,
            "Documentation",
            state,
            entries,
            used_paths,
            report,
        )

        document = MetsDocument(
            objid=representation.object_id or rep_id,
            type=representation_type(representation.content_type),
            label=representation.description,
            header=MetsHeader(
                create_date=now,
                last_mod_date=now,
                agents=agents_to_header(self._with_creator_agent(representation.agents)),
            ),
            metadata_sections=state.sections,
            file_groups=state.file_groups,
            struct_maps=[self._struct_map(rep_id, representation.status.as_string(), state)],
        )
        content = METSWriter(REPRESENTATION_SCHEMA_LOCATION).write(document)
        mets_destination = f"{rep_prefix}{METS_FILE}"
        entries.append(ContainerEntry(destination=mets_destination, content=content, descriptor=document))
        used_paths.add(mets_destination)

        algorithm = self.settings.checksum_algorithm
        entry = FileEntry(
            id=main.unique_id(None),
            mimetype="text/xml",
            size=len(content),
            created=now,
            checksum=digest_bytes(content, algorithm),
            checksum_type=algorithm,
            locations=[
                FileLocation(href=encode_href(mets_destination, self.settings.encode_href))
            ],
        )
        representations_group.groups.append(
            FileGroup(id=main.unique_id(None), use=f"{REPRESENTATIONS_FOLDER}/{rep_id}", files=[entry])
        )
        representations_div.divs.append(
            Div(
                label=rep_id,
                mets_pointers=[MetsPointer(href=entry.locations[0].href)],
                file_pointers=[FilePointer(file_id=entry.id)],
            )
        )
        logger.debug(f"Representation {rep_id}: {len(representation.data)} data file(s)")

    def _add_metadata(
        self,
        owner: Package | Representation,
        state: _DocumentState,
        entries: list[ContainerEntry],
        used_paths: set[str],
        report: ValidationReport,
    ) -> None:
        """Add the three metadata zones of a package or representation."""
        metadata_div = Div(label=METADATA_FOLDER)
        zones = (
            (Zone.DESCRIPTIVE, owner.descriptive_metadata),
            (Zone.PRESERVATION, owner.preservation_metadata),
            (Zone.OTHER, owner.other_metadata),
        )
        for zone, records in zones:
            zone_div = Div(label=zone.value)
            for record in records:
                section = self._metadata_section(record, zone, state, entries, used_paths, report)
                if section is None:
                    continue
                state.sections.append(section)
                if zone is Zone.DESCRIPTIVE:
                    zone_div.dmd_ids.append(section.id)
                else:
                    zone_div.adm_ids.append(section.id)
            if zone_div.dmd_ids or zone_div.adm_ids:
                metadata_div.divs.append(zone_div)
        if metadata_div.divs:
            state.zone_divs.append(metadata_div)

    def _metadata_section(
        self,
        record: MetadataRecord,
        zone: Zone,
        state: _DocumentState,
        entries: list[ContainerEntry],
        used_paths: set[str],
        report: ValidationReport,
    ) -> MetadataSection | None:
        local = "/".join([METADATA_FOLDER, zone.value, record.file.relative_path])
        facts = self._add_file(record.file, state.prefix + local, entries, used_paths, report)
        if facts is None:
            return None
        mdtype, other_mdtype = registry.mets_mdtype_attributes(record.metadata_type)
        return MetadataSection(
            id=state.unique_id(record.id),
            kind=_SECTION_KINDS[zone],
            created=record.created or facts.created,
            reference=MetadataReference(
                href=encode_href(local, self.settings.encode_href),
                mdtype=mdtype,
                other_mdtype=other_mdtype,
                mdtype_version=(
                    record.metadata_version if isinstance(record, DescriptiveMetadata) else None
                ),
                mimetype=facts.mimetype,
                size=facts.size,
                created=facts.created,
                checksum=facts.checksum,
                checksum_type=facts.checksum_type,
            ),
        )

    def _add_file_zone(
        self,
        files: list[IPFile],
        folder: str,
        use: str,
        state: _DocumentState,
        entries: list[ContainerEntry],
        used_paths: set[str],
        report: ValidationReport,
    ) -> None:
        """Add a file group and a zone div for a list of files."""
        if not files:
            return
        group = FileGroup(id=state.unique_id(None), use=use)
        div = Div(label=folder)
        for ip_file in files:
            local = "/".join([folder, ip_file.relative_path])
            facts = self._add_file(ip_file, state.prefix + local, entries, used_paths, report)
            if facts is None:
                continue
            entry = FileEntry(
                id=state.unique_id(None),
                mimetype=facts.mimetype,
                size=facts.size,
                created=facts.created,
                checksum=facts.checksum,
                checksum_type=facts.checksum_type,
                locations=[FileLocation(href=encode_href(local, self.settings.encode_href))],
            )
            group.files.append(entry)
            div.file_pointers.append(FilePointer(file_id=entry.id))
        if group.files:
            state.file_groups.append(group)
            state.zone_divs.append(div)

    def _add_file(
        self,
        ip_file: IPFile,
        destination: str,
        entries: list[ContainerEntry],
        used_paths: set[str],
        report: ValidationReport,
    ) -> _FileFacts | None:
        """Queue a file for writing and gather its fileSec attributes.

        Returns:
            The file's size, type, date and checksum; None if it was skipped
        """
        self.cancellation.check()
        source = Path(ip_file.path)
        if not source.is_file():
            report.error(codes.BUILD_FILE_NOT_FOUND, path=str(source), source=destination)
            return None
        if destination in used_paths:
            report.error(
                codes.BUILD_DUPLICATE_PATH,
                f"Two files are written to {destination}",
                path=str(source),
            )
            return None

        algorithm = self.settings.checksum_algorithm
        try:
            checksum = compute_digest(source, algorithm, self.settings.chunk_size)
            stat = source.stat()
        except OSError as e:
            report.error(codes.BUILD_FILE_NOT_FOUND, path=str(source), source=destination, cause=e)
            return None

        used_paths.add(destination)
        entries.append(ContainerEntry(destination=destination, source=source, descriptor=ip_file))
        return _FileFacts(
            mimetype=(
                ip_file.mimetype
                or mimetypes.guess_type(ip_file.file_name)[0]
                or DEFAULT_MIMETYPE
            ),
            size=stat.st_size,
            created=ip_file.created or datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
            checksum=checksum,
            checksum_type=algorithm,
        )

    def _struct_map(self, label: str, div_type: str | None, state: _DocumentState) -> StructMap:
        return StructMap(
            id=state.unique_id(None),
            type="PHYSICAL",
            label=COMMON_SPEC_STRUCTURAL_MAP,
            div=Div(id=state.unique_id(None), label=label, type=div_type, divs=state.zone_divs),
        )


def _is_valid_representation_id(representation_id: str | None) -> bool:
    if not representation_id or not representation_id.strip():
        return False
    if representation_id in (".", "..") or "/" in representation_id or "\\" in representation_id:
        return False
    return True


def _safe_name(name: str) -> str:
    return _UNSAFE_NAME.sub("_", name).strip("._") or "package"


def build_package(
    package: Package,
    destination: Path,
    name: str | None = None,
    as_zip: bool = True,
    settings: Settings | None = None,
    cancellation: CancellationToken | None = None,
) -> BuildResult:
    """Build a package (see PackageBuilder.build)."""
    return PackageBuilder(settings, cancellation).build(package, destination, name, as_zip)
