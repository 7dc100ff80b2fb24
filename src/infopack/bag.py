"""Import BagIt bags as information packages.

A bag carries no METS description, so the package is assembled from the bag
itself: ``bag-info.txt`` becomes a key-value descriptive metadata file, the
payload becomes representation data and the bag manifests supply the
checksums.
"""

import logging
import shutil
import tempfile
from pathlib import Path, PurePosixPath

import bagit

from schemas import codes
from schemas.package import DescriptiveMetadata, IPFile, Package, Representation
from schemas.report import ValidationReport
from schemas.vocabulary import MetadataCategory, MetadataType

from .builder import new_id
from .cancellation import CancellationToken
from .checksum import ALGORITHMS
from .constants import (
    BAG_DEFAULT_REPRESENTATION,
    BAG_ID_KEY,
    BAG_METADATA_FILE,
    BAG_METADATA_TYPE,
    BAG_PARENT_KEY,
    BAG_VENDOR_COMMONS_IP,
    BAG_VENDOR_KEY,
    DATA_FOLDER,
    DESCRIPTIVE_FOLDER,
    METADATA_FOLDER,
)
from .container import open_container
from .exceptions import ContainerError, OperationCancelled
from .parser import PackageReader
from .profiles import COMMON

logger = logging.getLogger(__name__)

# hashlib name -> METS CHECKSUMTYPE
_METS_ALGORITHMS = {hashlib_name: mets_name for mets_name, hashlib_name in ALGORITHMS.items()}


def _values(value) -> list[str]:
    """bag-info values are strings, or lists when a key is repeated."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value]
    return [str(value)]


def _escape_property(text: str) -> str:
    return (
        text.replace("\\", "\\\\")
        .replace("\n", "\\n")
        .replace("\r", "\\r")
    )


def write_properties(info: dict, path: Path) -> Path:
    """Write bag-info entries as a ``key=value`` properties file.

    Repeated keys produce one line per value. Keys are written in sorted order.
    """
    lines = []
    for key in sorted(info):
        escaped_key = _escape_property(key).replace("=", "\\=").replace(":", "\\:").replace(" ", "\\ ")
        for value in _values(info[key]):
            lines.append(f"{escaped_key}={_escape_property(value)}")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def find_bag_root(base: Path) -> Path | None:
    """Directory holding ``bagit.txt``: the base itself or its single child folder."""
    if (base / "bagit.txt").is_file():
        return base
    children = [child for child in base.iterdir() if not child.name.startswith(".")]
    if len(children) == 1 and children[0].is_dir() and (children[0] / "bagit.txt").is_file():
        return children[0]
    return None


class BagPackageReader(PackageReader):
    """Read a BagIt bag (directory or zip) into a Package.

    Usage::

        package = BagPackageReader().parse(Path("bag.zip"), destination=Path("work"))
    """

    def __init__(self, cancellation: CancellationToken | None = None):
        self.cancellation = cancellation or CancellationToken()

    def parse(self, source: Path, destination: Path | None = None) -> Package:
        """Read a bag.

        Raises:
            OperationCancelled: If cancelled; temporary content is removed
        """
        source = Path(source)
        report = ValidationReport()
        package = Package(ids=[source.stem], profile=COMMON.name, report=report)
        logger.info(f"Importing bag {source}")

        try:
            container = open_container(source, destination)
        except ContainerError as e:
            report.error(codes.CONTAINER_NOT_READABLE, path=str(source), cause=e)
            logger.error(f"Cannot open bag {source}: {e}")
            return package

        bag_root = find_bag_root(container.base_path)
        if bag_root is None:
            report.error(codes.BAG_NOT_VALID, "No bagit.txt found", path=str(source))
            container.cleanup()
            return package
        package.base_path = bag_root

        try:
            bag = bagit.Bag(str(bag_root))
            bag.validate()
        except bagit.BagError as e:
            report.error(codes.BAG_NOT_VALID, path=str(bag_root), cause=e)
            logger.error(f"Bag {bag_root} is not valid: {e}")
            if container.temporary:
                container.cleanup()
                package.base_path = None
            return package

        if destination is not None:
            work_dir = Path(destination) / f"{source.stem}.metadata"
            created_work_dir = not work_dir.exists()
        else:
            work_dir = Path(tempfile.mkdtemp(prefix="infopack-bag-"))
            created_work_dir = True

        try:
            self._read_bag(bag, bag_root, work_dir, package)
        except OperationCancelled:
            logger.warning(f"Import of {source} cancelled")
            container.discard()
            if created_work_dir:
                shutil.rmtree(work_dir, ignore_errors=True)
            raise

        logger.info(
            f"Imported bag {package.id}: {len(package.representations)} representation(s)"
        )
        return package

    def _read_bag(self, bag: bagit.Bag, bag_root: Path, work_dir: Path, package: Package) -> None:
        info = dict(bag.info)
        report = package.report

        ids = _values(info.get(BAG_ID_KEY))
        if ids:
            package.ids = ids
        package.ancestors = _values(info.get(BAG_PARENT_KEY))

        properties = write_properties(
            info, work_dir / METADATA_FOLDER / DESCRIPTIVE_FOLDER / BAG_METADATA_FILE
        )
        package.descriptive_metadata.append(
            DescriptiveMetadata(
                id=new_id(),
                file=IPFile(path=properties, mimetype="text/plain"),
                metadata_type=MetadataType(
                    category=MetadataCategory.OTHER, other_value=BAG_METADATA_TYPE
                ),
            )
        )
        report.info(codes.BAG_METADATA_WRITTEN, path=str(properties))

        by_folder = _values(info.get(BAG_VENDOR_KEY)) == [BAG_VENDOR_COMMONS_IP]
        representations: dict[str, Representation] = {}
        for relative, hashes in sorted(bag.payload_entries().items()):
            self.cancellation.check()
            parts = PurePosixPath(relative.replace("\\", "/")).parts
            if not parts or parts[0] != DATA_FOLDER:
                continue
            folders = list(parts[1:-1])
            rep_id = BAG_DEFAULT_REPRESENTATION
            if by_folder and folders:
                rep_id = folders.pop(0)

            checksum, algorithm = _pick_checksum(hashes)
            ip_file = IPFile(
                path=bag_root.joinpath(*parts),
                relative_folders=folders,
                checksum=checksum,
                checksum_algorithm=algorithm,
            )
            representation = representations.setdefault(
                rep_id, Representation(representation_id=rep_id)
            )
            representation.data.append(ip_file)
            logger.debug(f"Payload file {relative} -> {rep_id}")

        package.representations = list(representations.values())
        if not package.representations:
            report.warn(codes.MAIN_METS_NO_REPRESENTATIONS_FOUND, "Bag has no payload files")


def _pick_checksum(hashes: dict[str, str]) -> tuple[str | None, str | None]:
    """Strongest manifest digest known to METS, as (value, METS algorithm name)."""
    for hashlib_name in ("sha512", "sha384", "sha256", "sha224", "sha1", "md5"):
        if hashlib_name in hashes:
            return hashes[hashlib_name], _METS_ALGORITHMS[hashlib_name]
    return None, None


def import_bag(
    source: Path,
    destination: Path | None = None,
    cancellation: CancellationToken | None = None,
) -> Package:
    """Read a bag (see BagPackageReader.parse)."""
    return BagPackageReader(cancellation).parse(source, destination)
