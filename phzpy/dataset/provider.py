"""Dataset providers.

A provider lists the qualified names inside a group and returns the dataset
for a qualified name. :class:`FileSystemProvider` reads ASCII files from a
directory tree, :class:`MemoryProvider` serves datasets held in memory.
"""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Mapping

from phzpy.dataset.ascii_parser import AsciiParser
from phzpy.dataset.qualified_name import QualifiedName
from phzpy.dataset.xydataset import XYDataset
from phzpy.errors import ParseError, PhzIOError


class DatasetProvider(ABC):
    @abstractmethod
    def list_contents(self, group: str | QualifiedName = "") -> list[QualifiedName]:
        """Qualified names of all datasets inside ``group``, recursively.

        The empty string is the root group. The result is sorted.
        """

        raise NotImplementedError

    @abstractmethod
    def get_dataset(self, qualified_name: QualifiedName) -> XYDataset | None:
        """The dataset for ``qualified_name``, or ``None`` if unknown."""

        raise NotImplementedError


class MemoryProvider(DatasetProvider):
    def __init__(self, datasets: Mapping[str | QualifiedName, XYDataset]):
        self._datasets = {QualifiedName(k): v for k, v in datasets.items()}

    def list_contents(self, group: str | QualifiedName = "") -> list[QualifiedName]:
        return sorted(name for name in self._datasets if name.belongs_to(group))

    def get_dataset(self, qualified_name: QualifiedName) -> XYDataset | None:
        return self._datasets.get(QualifiedName(qualified_name))


class FileSystemProvider(DatasetProvider):
    """Provider backed by a directory of ASCII dataset files.

    The groups of a qualified name are the sub-directories below ``root_path``,
    the last segment is the dataset name as given by the parser. Files which
    are not dataset files are ignored.

    Parameters
    ----------
    root_path:
        Directory containing the datasets.
    parser:
        Parser used for the files, an :class:`AsciiParser` by default.
    """

    def __init__(self, root_path: str | Path, parser: AsciiParser | None = None):
        self.root_path = Path(root_path)
        self.parser = parser if parser is not None else AsciiParser()
        self.log = logging.getLogger(self.__class__.__module__)
        if not self.root_path.is_dir():
            raise PhzIOError(f"Dataset root path {self.root_path} is not a directory")
        self._files = self.__scan()

    def __scan(self) -> dict[QualifiedName, Path]:
        files: dict[QualifiedName, Path] = {}
        for directory, subdirs, filenames in os.walk(self.root_path):
            subdirs.sort()
            for filename in sorted(filenames):
                path = Path(directory) / filename
                if not self.parser.is_dataset_file(path):
                    self.log.debug("Skipping non dataset file %s", path)
                    continue
                groups = path.parent.relative_to(self.root_path).parts
                name = QualifiedName(groups + (self.parser.get_name(path),))
                if name in files:
                    raise ParseError(
                        f"Files {files[name]} and {path} have the same qualified name",
                        name,
                    )
                files[name] = path
        self.log.info("Found %d datasets under %s", len(files), self.root_path)
        return files

    def list_contents(self, group: str | QualifiedName = "") -> list[QualifiedName]:
        return sorted(name for name in self._files if name.belongs_to(group))

    def get_dataset(self, qualified_name: QualifiedName) -> XYDataset | None:
        path = self._files.get(QualifiedName(qualified_name))
        if path is None:
            return None
        try:
            return self.parser.get_dataset(path)
        except ParseError as error:
            raise error.with_name(qualified_name)
