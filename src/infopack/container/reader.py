"""Open package containers (directories or zip archives) for reading."""

import logging
import shutil
import tempfile
import zipfile
from dataclasses import dataclass
from pathlib import Path

from ..constants import METS_FILE
from ..exceptions import ContainerError

logger = logging.getLogger(__name__)


@dataclass
class OpenedContainer:
    """A package container ready to be read from disk.

    Attributes:
        base_path: Directory holding the package content
        temporary: True when base_path is a temporary directory created by
            this invocation
        created: True when this invocation extracted into a new directory
            under the caller's destination
    """

    base_path: Path
    temporary: bool = False
    created: bool = False

    def cleanup(self) -> None:
        """Remove the extracted content if it lives in a temporary directory."""
        if self.temporary and self.base_path.exists():
            shutil.rmtree(self.base_path, ignore_errors=True)
            logger.debug(f"Removed temporary extraction {self.base_path}")

    def discard(self) -> None:
        """Remove everything this invocation extracted, wherever it went."""
        if (self.temporary or self.created) and self.base_path.exists():
            shutil.rmtree(self.base_path, ignore_errors=True)
            logger.debug(f"Removed extraction {self.base_path}")


def _safe_extract_member(archive: zipfile.ZipFile, member: zipfile.ZipInfo, extract_dir: Path) -> None:
    """Extract a member, refusing paths outside extract_dir."""
    root = extract_dir.resolve()
    target = (extract_dir / member.filename).resolve()
    try:
        target.relative_to(root)
    except ValueError as exc:
        raise ContainerError(f"Refusing to extract {member.filename}: outside {extract_dir}") from exc

    if member.is_dir():
        target.mkdir(parents=True, exist_ok=True)
        return
    target.parent.mkdir(parents=True, exist_ok=True)
    with archive.open(member) as src, open(target, "wb") as dest:
        shutil.copyfileobj(src, dest)


def extract_zip(source: Path, extract_dir: Path) -> Path:
    """Extract a zip archive into extract_dir.

    Raises:
        ContainerError: If the archive is unreadable or contains unsafe paths
    """
    try:
        with zipfile.ZipFile(source) as archive:
            extract_dir.mkdir(parents=True, exist_ok=True)
            for member in archive.infolist():
                _safe_extract_member(archive, member, extract_dir)
    except (zipfile.BadZipFile, OSError) as e:
        raise ContainerError(f"Cannot read zip archive {source}: {e}") from e
    logger.info(f"Extracted {source} to {extract_dir}")
    return extract_dir


def open_container(source: Path, destination: Path | None = None) -> OpenedContainer:
    """Prepare a package for reading.

    Directories are read in place. Zip archives are extracted into
    ``destination`` when given, otherwise into a fresh temporary directory
    owned by the caller (model file paths point into it).

    Raises:
        ContainerError: If the source does not exist or cannot be extracted
    """
    source = Path(source)
    if source.is_dir():
        return OpenedContainer(base_path=source)
    if not source.exists():
        raise ContainerError(f"Package not found: {source}")
    if not zipfile.is_zipfile(source):
        raise ContainerError(f"Package is neither a directory nor a zip archive: {source}")

    if destination is not None:
        extract_dir = Path(destination) / source.stem
        created = not extract_dir.exists()
        try:
            extract_zip(source, extract_dir)
        except ContainerError:
            if created:
                shutil.rmtree(extract_dir, ignore_errors=True)
            raise
        return OpenedContainer(base_path=extract_dir, created=created)

    extract_dir = Path(tempfile.mkdtemp(prefix="infopack-"))
    try:
        extract_zip(source, extract_dir)
    except ContainerError:
        shutil.rmtree(extract_dir, ignore_errors=True)
        raise
    return OpenedContainer(base_path=extract_dir, temporary=True)


def find_main_mets(base_path: Path) -> Path | None:
    """Locate the main METS document, matching its name case-insensitively.

    Archives often wrap the package in a single top-level folder; when the
    root has no METS document but exactly one directory, that folder is
    searched instead.
    """
    candidates = [p for p in base_path.iterdir() if p.is_file() and p.name.lower() == METS_FILE.lower()]
    if candidates:
        return sorted(candidates)[0]

    folders = [p for p in base_path.iterdir() if p.is_dir()]
    if len(folders) == 1:
        return find_main_mets(folders[0])
    return None
