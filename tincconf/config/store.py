"""
Ordered multi-valued configuration store.

Entries are kept in one sorted index keyed by (variable, line, file) with the
variable compared case-insensitively. Grouping by variable falls out of the
key order, so every occurrence of a repeated directive is reachable from the
first one by walking successors, in the order the lines were read.
"""

import logging
from bisect import bisect_left, bisect_right
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)

SortKey = Tuple[str, int, str]


@dataclass(frozen=True)
class ConfigEntry:
    """One parsed directive occurrence."""
    variable: str
    value: str
    file: str
    line: int
    _key: SortKey = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, '_key', make_key(self.variable, self.line, self.file))

    @property
    def sort_key(self) -> SortKey:
        return self._key

    def location(self) -> str:
        return f"{self.file} line {self.line}"


def make_key(variable: str, line: int = 0, file: str = "") -> SortKey:
    return (variable.lower(), line, file)


class ConfigStore:
    """
    Ordered container of ConfigEntry values.

    The store is populated during startup and read-only afterwards. Use it as
    a context manager, or call clear(), to tear every entry down at once.

    Example:
        with ConfigStore() as store:
            read_config_file(store, "/etc/tinc/tinc.conf")
            for entry in store.lookup_all("ConnectTo"):
                ...
    """

    def __init__(self):
        self._keys: List[SortKey] = []
        self._entries: List[ConfigEntry] = []

    def insert(self, entry: ConfigEntry) -> None:
        """Add an entry. Duplicates are always accepted."""
        # bisect_right keeps entries with identical keys in insertion order
        index = bisect_right(self._keys, entry.sort_key)
        self._keys.insert(index, entry.sort_key)
        self._entries.insert(index, entry)

    def lookup_first(self, variable: str) -> Optional[ConfigEntry]:
        """Return the occurrence of variable with the lowest (line, file)."""
        index = bisect_left(self._keys, make_key(variable))
        if index == len(self._entries):
            return None

        found = self._entries[index]
        if found.variable.lower() != variable.lower():
            return None

        return found

    def lookup_next(self, entry: ConfigEntry) -> Optional[ConfigEntry]:
        """Return the occurrence following entry, if it has the same variable."""
        index = self._index_of(entry)
        if index is None or index + 1 >= len(self._entries):
            return None

        found = self._entries[index + 1]
        if found.variable.lower() != entry.variable.lower():
            return None

        return found

    def lookup_all(self, variable: str) -> Iterator[ConfigEntry]:
        """Yield every occurrence of variable in (line, file) order."""
        entry = self.lookup_first(variable)
        while entry is not None:
            yield entry
            entry = self.lookup_next(entry)

    def _index_of(self, entry: ConfigEntry) -> Optional[int]:
        lo = bisect_left(self._keys, entry.sort_key)
        hi = bisect_right(self._keys, entry.sort_key, lo)
        if lo == hi:
            return None

        for index in range(lo, hi):
            if self._entries[index] is entry:
                return index
        return lo

    def clear(self) -> None:
        """Release every entry and reset the store to empty."""
        logger.debug(f"Releasing {len(self._entries)} configuration entries")
        self._keys.clear()
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ConfigEntry]:
        return iter(list(self._entries))

    def __contains__(self, variable: object) -> bool:
        return isinstance(variable, str) and self.lookup_first(variable) is not None

    def __enter__(self) -> 'ConfigStore':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.clear()
        return False

    def __repr__(self) -> str:
        return f"ConfigStore(entries={len(self._entries)})"
