"""Per-invocation state shared by the parsing components."""

import logging
import tempfile
from dataclasses import dataclass, field
from pathlib import Path

from schemas.package import Representation
from schemas.report import ValidationReport

from .cancellation import CancellationToken
from .config import Settings
from .mets.reader import METSReader
from .profiles import COMMON, Profile

logger = logging.getLogger(__name__)


class ProgressListener:
    """Receives progress notifications from the parser.

    All methods are no-ops; subclass and override the ones of interest.
    """

    def representations_started(self, total: int) -> None:
        pass

    def representation_started(self, representation_id: str) -> None:
        pass

    def representation_ended(self, representation: Representation) -> None:
        pass

    def representations_ended(self) -> None:
        pass


class LoggingProgressListener(ProgressListener):
    """Log representation progress at INFO level."""

    def __init__(self):
        self.total = 0
        self.done = 0

    def representations_started(self, total: int) -> None:
        self.total = total
        logger.info(f"Processing {total} representation(s)")

    def representation_ended(self, representation: Representation) -> None:
        self.done += 1
        logger.info(
            f"Representation {representation.representation_id} done "
            f"({self.done}/{self.total}, {len(representation.data)} data files)"
        )


@dataclass
class ParseContext:
    """Everything a resolver needs besides the document it is working on.

    Attributes:
        settings: Invocation settings
        profile: Profile the package is read with
        report: Report receiving every entry of this invocation
        cancellation: Token checked between work items
        work_dir: Directory receiving externalized inline metadata
        reader: METS reader used for nested description documents
        listener: Progress listener
    """

    settings: Settings
    profile: Profile = COMMON
    report: ValidationReport = field(default_factory=ValidationReport)
    cancellation: CancellationToken = field(default_factory=CancellationToken)
    work_dir: Path | None = None
    reader: METSReader = field(default_factory=METSReader)
    listener: ProgressListener = field(default_factory=ProgressListener)

    def check_cancelled(self) -> None:
        self.cancellation.check()

    def ensure_work_dir(self) -> Path:
        """Return the work directory, creating a temporary one if unset."""
        if self.work_dir is None:
            self.work_dir = Path(tempfile.mkdtemp(prefix="infopack-metadata-"))
        self.work_dir.mkdir(parents=True, exist_ok=True)
        return self.work_dir
