"""Write built packages to a zip archive or a directory tree.

Writers never touch the final location until every entry has been written:
content goes to a staging path next to the target and is promoted with a
rename on success. Cancellation or failure removes the staging path.
"""

import logging
import os
import shutil
import uuid
import zipfile
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ..cancellation import CancellationToken
from ..exceptions import BuildError

logger = logging.getLogger(__name__)


@dataclass
class ContainerEntry:
    """One item of a built package.

    Attributes:
        destination: '/'-separated path inside the package
        source: Local file to copy, if the entry is backed by a file
        content: In-memory content (e.g. a serialized METS document)
        descriptor: Description-document node for the entry, if any
    """

    destination: str
    source: Path | None = None
    content: bytes | None = None
    descriptor: Any = None


class ContainerWriter(ABC):
    """Base class for package container writers."""

    def __init__(self, cancellation: CancellationToken | None = None):
        self.cancellation = cancellation or CancellationToken()

    def write(self, entries: list[ContainerEntry], target: Path) -> Path:
        """Write entries to target via a staging path.

        Args:
            entries: Package entries, in write order
            target: Final zip file or directory path

        Returns:
            The target path

        Raises:
            BuildError: If the target already exists or an entry is invalid
            OperationCancelled: If cancellation is requested mid-write
        """
        target = Path(target)
        if target.exists():
            raise BuildError(f"Refusing to overwrite existing {target}")
        target.parent.mkdir(parents=True, exist_ok=True)

        staging = target.parent / f".{target.name}.partial-{uuid.uuid4().hex[:8]}"
        try:
            self._write_staging(entries, staging)
            os.replace(staging, target)
        except BaseException:
            self._discard(staging)
            raise
        logger.info(f"Wrote {len(entries)} entries to {target}")
        return target

    @abstractmethod
    def _write_staging(self, entries: list[ContainerEntry], staging: Path) -> None:
        """Write all entries to the staging path."""
        pass

    def _discard(self, staging: Path) -> None:
        if staging.is_dir():
            shutil.rmtree(staging, ignore_errors=True)
        elif staging.exists():
            staging.unlink()
        logger.debug(f"Discarded staging path {staging}")


def _check_entry(entry: ContainerEntry) -> None:
    if entry.source is None and entry.content is None:
        raise BuildError(f"Entry {entry.destination} has neither source nor content")


class ZipContainerWriter(ContainerWriter):
    """Write a package as a zip archive."""

    def _write_staging(self, entries: list[ContainerEntry], staging: Path) -> None:
        with zipfile.ZipFile(staging, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            for entry in entries:
                self.cancellation.check()
                _check_entry(entry)
                if entry.content is not None:
                    archive.writestr(entry.destination, entry.content)
                else:
                    with open(entry.source, "rb") as src, archive.open(entry.destination, "w") as dest:
                        shutil.copyfileobj(src, dest)
                logger.debug(f"Zipped {entry.destination}")


class DirectoryContainerWriter(ContainerWriter):
    """Write a package as a directory tree."""

    def _write_staging(self, entries: list[ContainerEntry], staging: Path) -> None:
        staging.mkdir(parents=True)
        for entry in entries:
            self.cancellation.check()
            _check_entry(entry)
            target = staging.joinpath(*entry.destination.split("/"))
            target.parent.mkdir(parents=True, exist_ok=True)
            if entry.content is not None:
                target.write_bytes(entry.content)
            else:
                shutil.copyfile(entry.source, target)
            logger.debug(f"Copied {entry.destination}")
