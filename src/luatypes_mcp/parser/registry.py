"""Symbol registry: identity, deduplication and kind promotion."""

import logging
from typing import Callable, Iterator, Optional

from .symbols import Diagnostic, ReferenceEdge, SymbolEntry, SymbolKind


logger = logging.getLogger(__name__)

Reporter = Callable[[str, str, int, int], None]


class DiagnosticLog:
    """Collects recoverable parse anomalies and logs each one."""

    def __init__(self):
        self.entries: list[Diagnostic] = []

    def report(self, code: str, message: str, file: int, line: int) -> None:
        self.entries.append(Diagnostic(code=code, message=message, file=file, line=line))
        logger.warning("[%s] file %d line %d: %s", code, file, line, message)

    def __len__(self) -> int:
        return len(self.entries)


class SymbolRegistry:
    """Owns every symbol created during one build.

    Symbols are keyed by (name, kind). A name first met as a type reference
    gets an Unknown placeholder which is promoted in place, keeping its id
    and reference edges, once the declaring marker is scanned.

    Ids come from a single counter shared with methods and members, so any
    id handed out during a build identifies exactly one object.
    """

    def __init__(self, report: Optional[Reporter] = None):
        self._entries: dict[int, SymbolEntry] = {}
        self._by_key: dict[tuple[str, SymbolKind], SymbolEntry] = {}
        self._by_name: dict[str, list[SymbolEntry]] = {}
        self._next_id = 0
        self._report = report

    def next_id(self) -> int:
        """Allocate a fresh id."""
        allocated = self._next_id
        self._next_id += 1
        return allocated

    def get(self, symbol_id: int) -> Optional[SymbolEntry]:
        return self._entries.get(symbol_id)

    def find(self, name: str, kind: SymbolKind) -> Optional[SymbolEntry]:
        """Exact (name, kind) lookup."""
        return self._by_key.get((name, kind))

    def lookup(self, name: str) -> Optional[SymbolEntry]:
        """First concrete symbol registered under `name`, else its placeholder."""
        candidates = self._by_name.get(name)
        if not candidates:
            return None
        for entry in candidates:
            if entry.kind != SymbolKind.UNKNOWN:
                return entry
        return candidates[0]

    def get_or_create(
        self,
        kind: SymbolKind,
        name: str,
        line: int,
        file: int,
        referenced_by: Optional[ReferenceEdge] = None,
    ) -> SymbolEntry:
        """Return the symbol for (name, kind), promoting or creating it as needed.

        Requesting kind Unknown means "any symbol with this name": an existing
        concrete symbol is returned rather than a duplicate placeholder.
        """
        entry = self._by_key.get((name, kind))

        if entry is None and kind == SymbolKind.UNKNOWN:
            entry = self.lookup(name)

        if entry is None:
            placeholder = self._by_key.get((name, SymbolKind.UNKNOWN))
            if placeholder is not None:
                entry = self._promote(placeholder, kind, line, file)

        if entry is None:
            self._check_conflict(name, kind, line, file)
            entry = self._create(kind, name, line, file)

        if referenced_by is not None:
            entry.add_reference(referenced_by)

        return entry

    def resolve(self, name: str, line: int, file: int) -> SymbolEntry:
        """Resolve a type reference, creating an Unknown placeholder if needed."""
        return self.get_or_create(SymbolKind.UNKNOWN, name, line, file)

    def _create(self, kind: SymbolKind, name: str, line: int, file: int) -> SymbolEntry:
        entry = SymbolEntry(
            id=self.next_id(),
            name=name,
            kind=kind,
            file=file,
            line_start=line,
            line_end=line,
        )
        self._entries[entry.id] = entry
        self._by_key[(name, kind)] = entry
        self._by_name.setdefault(name, []).append(entry)
        logger.debug("Created %s symbol %r (id %d)", kind.value, name, entry.id)
        return entry

    def _promote(self, entry: SymbolEntry, kind: SymbolKind, line: int, file: int) -> SymbolEntry:
        del self._by_key[(entry.name, SymbolKind.UNKNOWN)]
        entry.kind = kind
        entry.file = file
        entry.line_start = line
        entry.line_end = line
        self._by_key[(entry.name, kind)] = entry
        logger.debug("Promoted %r (id %d) to %s", entry.name, entry.id, kind.value)
        return entry

    def _check_conflict(self, name: str, kind: SymbolKind, line: int, file: int) -> None:
        if kind == SymbolKind.UNKNOWN or self._report is None:
            return
        for existing in self._by_name.get(name, []):
            if existing.kind != SymbolKind.UNKNOWN and existing.kind != kind:
                self._report(
                    "kind-conflict",
                    f"{name} declared as {kind.value} but already declared as "
                    f"{existing.kind.value} (file {existing.file} line {existing.line_start})",
                    file,
                    line,
                )
                return

    def __iter__(self) -> Iterator[SymbolEntry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)
