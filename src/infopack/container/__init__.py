"""Package containers: zip archives and directory trees."""

from .reader import OpenedContainer, extract_zip, find_main_mets, open_container
from .writer import (
    ContainerEntry,
    ContainerWriter,
    DirectoryContainerWriter,
    ZipContainerWriter,
)

__all__ = [
    "ContainerEntry",
    "ContainerWriter",
    "DirectoryContainerWriter",
    "OpenedContainer",
    "ZipContainerWriter",
    "extract_zip",
    "find_main_mets",
    "open_container",
]
