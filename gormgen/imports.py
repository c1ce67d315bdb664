"""Import path lists written into the headers of generated files."""

from __future__ import annotations

from dataclasses import dataclass
from itertools import chain


@dataclass(frozen=True)
class ImportList:
    """An ordered list of quoted import paths.

    Empty entries separate import groups. ``add`` never changes the list it
    is called on; it returns a new one.
    """

    paths: tuple[str, ...] = ()

    def add(self, *args: str) -> ImportList:
        """A new list with the paths appended, quoted and without duplicates.

        Empty paths are kept as group separators, and one more separator is
        appended at the end.
        """
        paths = list(self.paths)
        for path in args:
            path = path.strip()
            if not path:
                paths.append("")
                continue
            if not path.endswith('"'):
                path = f'"{path}"'
            if path not in paths:
                paths.append(path)
        paths.append("")
        return ImportList(tuple(paths))

    def output(self) -> list[str]:
        """The paths as a list, ready to render into an import block."""
        return list(self.paths)


def _grouped(*groups: tuple[str, ...]) -> ImportList:
    """An import list of the groups, separated by blank entries."""
    separated = chain.from_iterable((("",) + group) for group in groups)
    return ImportList().add(*list(separated)[1:])


_STD = ("context", "database/sql", "strings")
_ORM = tuple(f"gorm.io/gorm{suffix}" for suffix in ("", "/schema", "/clause"))
_GEN = tuple(f"gorm.io/gen{suffix}" for suffix in ("", "/field", "/helper"))
_RESOLVER = ("gorm.io/plugin/dbresolver",)

IMPORT_LIST = _grouped(_STD, _ORM, _GEN, _RESOLVER)

_TEST_STD = ("context", "fmt", "strconv", "testing")
_TEST_DB = ("gorm.io/driver/sqlite", "gorm.io/gorm")

UNIT_TEST_IMPORT_LIST = _grouped(_TEST_STD, _TEST_DB)