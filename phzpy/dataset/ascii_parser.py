"""Reader for two-column ASCII dataset files.

File layout::

    # NAME: Dataset name
    # any other comment
    1000.0  0.0
    1010.0  0.2
    ...

The dataset name comes from the ``NAME`` keyword (several entries are joined
with ``;``), otherwise from a bare ``# name`` first line, otherwise from the
file name without its extension.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

import numpy as np
import pandas as pd

from phzpy.dataset.xydataset import XYDataset
from phzpy.errors import DomainError, ParseError, PhzIOError

DEFAULT_NAME_REGEX = r"\s*#\s*(\w+)\s*$"


class AsciiParser:
    """Parse datasets stored as whitespace separated ASCII columns.

    Parameters
    ----------
    regex_name:
        Regular expression whose first group extracts the dataset name from the
        first non-empty line of the file.
    """

    def __init__(self, regex_name: str = DEFAULT_NAME_REGEX):
        self.regex_name = re.compile(regex_name)
        self.log = logging.getLogger(self.__class__.__module__)

    @staticmethod
    def _read_lines(file: str | Path) -> list[str]:
        try:
            with open(file, "r") as fh:
                return fh.read().splitlines()
        except FileNotFoundError as error:
            raise PhzIOError(f"File does not exist : {file}") from error
        except OSError as error:
            raise PhzIOError(f"Could not read {file}: {error}") from error

    def get_parameter(self, file: str | Path, key_word: str) -> str:
        """Value of the ``# key_word: value`` comment, ``""`` if absent.

        Multiple occurrences are concatenated with ``;``.
        """

        expression = re.compile(r"^\s*#\s*" + re.escape(key_word) + r"\s*:\s*(.+)\s*$")
        values = []
        for line in self._read_lines(file):
            match = expression.match(line)
            if line and match:
                values.append(match.group(1).strip())
        return ";".join(values)

    def get_name(self, file: str | Path) -> str:
        name = self.get_parameter(file, "NAME")
        if name:
            return name

        first = next((line for line in self._read_lines(file) if line), "")
        match = self.regex_name.fullmatch(first)
        if match:
            return match.group(1)
        return Path(file).stem

    def is_dataset_file(self, file: str | Path) -> bool:
        """True if the first data line holds exactly two floats."""

        comment = re.compile(r"\s*#.*")
        for line in self._read_lines(file):
            if not line.strip() or comment.fullmatch(line):
                continue
            tokens = line.split()
            if len(tokens) != 2:
                return False
            try:
                float(tokens[0])
                float(tokens[1])
            except ValueError:
                return False
            return True
        return False

    def get_dataset(self, file: str | Path) -> XYDataset:
        if not Path(file).is_file():
            raise PhzIOError(f"File does not exist : {file}")
        try:
            frame = pd.read_csv(
                file,
                sep=r"\s+",
                comment="#",
                header=None,
                dtype=str,
                skip_blank_lines=True,
            )
        except pd.errors.EmptyDataError as error:
            raise ParseError(f"No data found in {file}") from error
        except pd.errors.ParserError as error:
            raise ParseError(f"Malformed dataset file {file}: {error}") from error

        if frame.shape[1] != 2:
            raise ParseError(
                f"Dataset file {file} must have 2 columns, found {frame.shape[1]}"
            )
        if frame.isna().to_numpy().any():
            raise ParseError(f"Dataset file {file} contains missing values")
        try:
            values = frame.apply(pd.to_numeric, errors="raise").to_numpy(dtype=float)
        except ValueError as error:
            raise ParseError(f"Non numeric value in {file}: {error}") from error
        if not np.all(np.isfinite(values)):
            raise ParseError(f"Dataset file {file} contains non finite values")

        try:
            return XYDataset(values[:, 0], values[:, 1])
        except DomainError as error:
            raise ParseError(f"Invalid dataset in {file}: {error}") from error
