"""Read, validate and build METS-described information packages."""

__version__ = "0.1.0"

from .bag import BagPackageReader, import_bag
from .builder import BuildResult, PackageBuilder, build_package
from .cancellation import CancellationToken
from .config import Settings
from .exceptions import (
    BuildError,
    ChecksumMismatchError,
    ContainerError,
    InfopackError,
    IntegrityError,
    MetsReadError,
    OperationCancelled,
    ParseError,
    UnknownAlgorithmError,
)
from .parser import METSPackageReader, PackageReader, parse_package
from .profiles import COMMON, LEGACY, Profile, get_profile

__all__ = [
    "BagPackageReader",
    "BuildError",
    "BuildResult",
    "COMMON",
    "CancellationToken",
    "ChecksumMismatchError",
    "ContainerError",
    "InfopackError",
    "IntegrityError",
    "LEGACY",
    "METSPackageReader",
    "MetsReadError",
    "OperationCancelled",
    "PackageBuilder",
    "PackageReader",
    "ParseError",
    "Profile",
    "Settings",
    "UnknownAlgorithmError",
    "build_package",
    "get_profile",
    "import_bag",
    "parse_package",
]
