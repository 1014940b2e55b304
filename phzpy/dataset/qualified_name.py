from __future__ import annotations

from functools import total_ordering
from typing import Iterable


@total_ordering
class QualifiedName:
    """Hierarchical dataset name such as ``"group/subgroup/name"``.

    Ordering and equality work on the tuple of segments.

    Parameters
    ----------
    name:
        Either a forward-slash separated string or a sequence of segments.
    """

    __slots__ = ("_parts",)

    def __init__(self, name: "str | Iterable[str] | QualifiedName"):
        if isinstance(name, QualifiedName):
            parts = name.parts
        elif isinstance(name, str):
            parts = tuple(name.split("/"))
        else:
            parts = tuple(name)
        if not parts or any((not isinstance(p, str)) or p == "" for p in parts):
            raise ValueError(f"Invalid qualified name {name!r}")
        self._parts = parts

    @property
    def parts(self) -> tuple[str, ...]:
        return self._parts

    @property
    def groups(self) -> tuple[str, ...]:
        return self._parts[:-1]

    @property
    def dataset_name(self) -> str:
        return self._parts[-1]

    @property
    def parent(self) -> "QualifiedName | None":
        return QualifiedName(self._parts[:-1]) if len(self._parts) > 1 else None

    def belongs_to(self, group: "str | QualifiedName") -> bool:
        """True if the name lies (recursively) inside ``group``."""

        if isinstance(group, str):
            group = group.strip("/")
            if group == "":
                return True
        prefix = QualifiedName(group).parts
        return self.groups[: len(prefix)] == prefix

    def qualified_name(self) -> str:
        return "/".join(self._parts)

    def __str__(self) -> str:
        return self.qualified_name()

    def __repr__(self) -> str:
        return f"QualifiedName({self.qualified_name()!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, QualifiedName):
            return NotImplemented
        return self._parts == other._parts

    def __lt__(self, other: "QualifiedName") -> bool:
        if not isinstance(other, QualifiedName):
            return NotImplemented
        return self._parts < other._parts

    def __hash__(self) -> int:
        return hash(self._parts)

    def __reduce__(self):
        return (QualifiedName, (self._parts,))
