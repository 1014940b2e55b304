"""Dataset naming, storage and providers."""

from phzpy.dataset.ascii_parser import AsciiParser
from phzpy.dataset.provider import DatasetProvider, FileSystemProvider, MemoryProvider
from phzpy.dataset.qualified_name import QualifiedName
from phzpy.dataset.xydataset import XYDataset

__all__ = [
    "AsciiParser",
    "DatasetProvider",
    "FileSystemProvider",
    "MemoryProvider",
    "QualifiedName",
    "XYDataset",
]
