"""Read information packages into the package object model.

The parser runs a fixed sequence of stages: open the container, locate and
read the main METS document, classify the structural map, resolve package
metadata, reconcile representations, then resolve schemas, documentation,
submission files and ancestors. Anything wrong with the package is recorded
in its report; only an unreadable container or main document stops the run
early, and even then a Package carrying the report is returned.
"""

import logging
import shutil
from abc import ABC, abstractmethod
from pathlib import Path

from pydantic import ValidationError

from schemas import codes
from schemas.mets import Div, IndexTarget, MetsDocument
from schemas.package import Package
from schemas.report import ValidationReport
from schemas.vocabulary import IPRole

from . import registry
from .cancellation import CancellationToken
from .config import Settings
from .constants import METADATA_FOLDER
from .container import OpenedContainer, find_main_mets, open_container
from .context import ParseContext, ProgressListener
from .exceptions import ContainerError, MetsReadError, OperationCancelled, ParseError
from .header import agents_from_header, parse_package_type
from .href import decode_href
from .mets.reader import METSReader
from .profiles import METADATA_ZONES, Profile, Zone, get_profile
from .reconciler import RepresentationReconciler, attach_metadata
from .resolvers.files import FileResolver
from .resolvers.metadata import MetadataResolver
from .structmap import StructMapWalker, ZoneMap

logger = logging.getLogger(__name__)


class PackageReader(ABC):
    """Base class for package readers."""

    @abstractmethod
    def parse(self, source: Path, destination: Path | None = None) -> Package:
        """Read a package.

        Args:
            source: Package directory or archive
            destination: Directory receiving extracted content, if any

        Returns:
            Package with its validation report
        """
        pass


class METSPackageReader(PackageReader):
    """Read METS-described packages (common and legacy profiles).

    Usage::

        reader = METSPackageReader(Settings({"profile": "eark"}))
        package = reader.parse(Path("sip.zip"), destination=Path("work"))
        if not package.report.is_valid():
            ...
    """

    def __init__(
        self,
        settings: Settings | None = None,
        profile: Profile | None = None,
        cancellation: CancellationToken | None = None,
        listener: ProgressListener | None = None,
    ):
        self.settings = settings or Settings()
        self.profile = profile or get_profile(self.settings.profile)
        self.cancellation = cancellation or CancellationToken()
        self.listener = listener or ProgressListener()

    def parse(self, source: Path, destination: Path | None = None) -> Package:
        """Read a package.

        Raises:
            OperationCancelled: If cancelled; no partial package is returned
                and temporary content created by this call is removed
        """
        source = Path(source)
        report = ValidationReport()
        logger.info(f"Parsing package {source} ({self.profile.name} profile)")

        try:
            container = open_container(source, destination)
        except ContainerError as e:
            report.error(codes.CONTAINER_NOT_READABLE, path=str(source), cause=e)
            logger.error(f"Cannot open package {source}: {e}")
            return self._minimal_package(source.stem, None, report)

        context = ParseContext(
            settings=self.settings,
            profile=self.profile,
            report=report,
            cancellation=self.cancellation,
            work_dir=(
                Path(destination) / f"{source.stem}.metadata" if destination is not None else None
            ),
            reader=METSReader(self.settings.schema_path if self.settings.validate_schema else None),
            listener=self.listener,
        )
        existing_work_dir = context.work_dir is not None and context.work_dir.exists()

        try:
            package = self._parse_container(container, source, context)
        except OperationCancelled:
            logger.warning(f"Parsing of {source} cancelled")
            container.discard()
            if context.work_dir is not None and not existing_work_dir:
                shutil.rmtree(context.work_dir, ignore_errors=True)
            raise

        logger.info(
            f"Parsed package {package.id}: {len(package.representations)} representation(s), "
            f"{'valid' if report.is_valid() else 'not valid'}"
        )
        return package

    def _minimal_package(
        self,
        package_id: str,
        base_path: Path | None,
        report: ValidationReport,
    ) -> Package:
        return Package(
            ids=[package_id],
            profile=self.profile.name,
            base_path=base_path,
            report=report,
        )

    def _abandon(
        self,
        container: OpenedContainer,
        package_id: str,
        base_path: Path,
        report: ValidationReport,
    ) -> Package:
        """Minimal package for a container that cannot be read any further.

        A temporary extraction is removed, so the package keeps no base path.
        """
        if container.temporary:
            container.cleanup()
            base_path = None
        return self._minimal_package(package_id, base_path, report)

    def _parse_container(
        self,
        container: OpenedContainer,
        source: Path,
        context: ParseContext,
    ) -> Package:
        report = context.report
        mets_path = find_main_mets(container.base_path)
        if mets_path is None:
            report.error(codes.MAIN_METS_FILE_NOT_FOUND, path=str(source))
            return self._abandon(container, source.stem, container.base_path, report)
        base_path = mets_path.parent
        report.info(codes.MAIN_METS_FILE_FOUND, path=mets_path.name)

        try:
            document = context.reader.read(mets_path)
        except MetsReadError as e:
            report.error(codes.MAIN_METS_NOT_VALID, path=mets_path.name, cause=e)
            return self._abandon(container, source.stem, base_path, report)
        report.info(codes.MAIN_METS_IS_VALID, path=mets_path.name)

        package = self._minimal_package(source.stem, base_path, report)
        self._read_identity(document, package, base_path)

        walker = StructMapWalker(self.profile, report)
        zone_map = walker.classify(document, is_main=True)
        index = document.index()
        file_resolver = FileResolver(context, package_root=base_path)
        metadata_resolver = MetadataResolver(context, file_resolver)

        self._read_metadata(zone_map, index, package, metadata_resolver, base_path)

        representations_div = zone_map.get(Zone.REPRESENTATIONS)
        if representations_div is not None and representations_div.divs:
            reconciler = RepresentationReconciler(context, file_resolver, metadata_resolver, walker)
            package.representations = reconciler.reconcile(representations_div, index, base_path)
        else:
            report.warn(codes.MAIN_METS_NO_REPRESENTATIONS_FOUND)

        for zone, attribute in ((Zone.SCHEMAS, "schemas"), (Zone.DOCUMENTATION, "documentation")):
            div = zone_map.get(zone)
            if div is not None:
                files = file_resolver.resolve_zone(div, index, base_path, zone, base_path / zone.value)
                getattr(package, attribute).extend(files)

        submission_div = zone_map.get(Zone.SUBMISSION)
        if submission_div is not None:
            if package.role is IPRole.AIP:
                for file in file_resolver.resolve_zone(
                    submission_div, index, base_path, Zone.SUBMISSION, base_path / Zone.SUBMISSION.value
                ):
                    package.add_submission(file)
            else:
                report.warn(codes.SUBMISSION_NOT_ALLOWED, source=submission_div.describe())

        ancestors_div = zone_map.get(Zone.ANCESTORS)
        if ancestors_div is not None:
            package.ancestors = self._read_ancestors(ancestors_div)

        return package

    def _read_identity(self, document: MetsDocument, package: Package, base_path: Path) -> None:
        """Copy identifiers, type, status, dates and agents from the document."""
        report = package.report
        ids = (document.objid or "").split()
        if ids:
            package.ids = ids
        else:
            report.warn(codes.MAIN_METS_HAS_NO_OBJID)
            package.ids = [base_path.name]

        package.role, package.content_type = parse_package_type(document.type, self.profile, report)
        status, recognized = registry.parse_status(document.header.record_status)
        if not recognized:
            report.warn(
                codes.UNKNOWN_RECORD_STATUS,
                f"Record status {document.header.record_status!r} not recognized; assuming NEW",
            )
        package.status = status
        package.description = document.label
        package.create_date = document.header.create_date
        package.modification_date = document.header.last_mod_date
        package.agents = agents_from_header(document.header)

    def _read_metadata(
        self,
        zone_map: ZoneMap,
        index: dict[str, IndexTarget],
        package: Package,
        metadata_resolver: MetadataResolver,
        base_path: Path,
    ) -> None:
        """Resolve package-level metadata zones."""
        if self.profile.classify_metadata and zone_map.main_div is not None:
            package.descriptive_metadata.extend(
                metadata_resolver.resolve_legacy_sections(
                    zone_map.main_div.dmd_ids,
                    index,
                    base_path,
                    source=zone_map.main_div.describe(),
                )
            )

        for zone in METADATA_ZONES:
            div = zone_map.get(zone)
            if div is None:
                continue
            records = metadata_resolver.resolve_zone(
                div, index, base_path, zone, base_path / METADATA_FOLDER / zone.value
            )
            attach_metadata(package, zone, records)

        if not package.descriptive_metadata:
            package.report.warn(codes.PACKAGE_HAS_NO_DESCRIPTIVE_METADATA)

    def _read_ancestors(self, div: Div) -> list[str]:
        ancestors = []
        pending = [div]
        while pending:
            current = pending.pop(0)
            for pointer in current.mets_pointers:
                if pointer.href:
                    ancestors.append(decode_href(pointer.href, self.settings.encode_href))
            pending.extend(current.divs)
        return ancestors


def parse_package(
    source: Path,
    destination: Path | None = None,
    settings: Settings | None = None,
    cancellation: CancellationToken | None = None,
) -> Package:
    """Read a package with the profile named in settings."""
    return METSPackageReader(settings, cancellation=cancellation).parse(source, destination)


def load_package_model(path: Path) -> Package:
    """Load a package model written as JSON (e.g. by ``parse --model-output``).

    Raises:
        ParseError: If the file is not a valid package model
    """
    path = Path(path)
    try:
        return Package.model_validate_json(path.read_text())
    except ValidationError as e:
        raise ParseError(f"Invalid package model {path}: {e}") from e
