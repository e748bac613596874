"""Database assembly: partition, index and freeze the registry's symbols."""

import bisect
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Union

from .registry import SymbolRegistry
from .symbols import (
    AliasSymbol,
    ClassSymbol,
    Diagnostic,
    EdgeKind,
    EnumSymbol,
    FunctionSymbol,
    Member,
    Method,
    NameEntry,
    ReferenceEdge,
    Symbol,
    SymbolKind,
)


Referencer = Union[Symbol, Method, Member]


@dataclass(frozen=True)
class SearchResult:
    """Symbols and members whose names match a query, each sorted by name."""
    symbols: tuple[Symbol, ...] = ()
    properties: tuple[Member, ...] = ()
    methods: tuple[Method, ...] = ()
    parameters: tuple[Member, ...] = ()


def _name_index(items: Iterable) -> tuple[NameEntry, ...]:
    entries = [NameEntry(name=item.name.lower(), id=item.id) for item in items]
    entries.sort(key=lambda e: (e.name, e.id))
    return tuple(entries)


def _id_map(items: Iterable) -> Mapping[int, object]:
    return MappingProxyType({item.id: item for item in items})


def _by_name(items: Iterable) -> list:
    return sorted(items, key=lambda item: (item.name.lower(), item.id))


@dataclass(frozen=True)
class SymbolDatabase:
    """Immutable, cross-referenced snapshot of every declared and referenced symbol."""
    classes: tuple[ClassSymbol, ...] = ()
    enums: tuple[EnumSymbol, ...] = ()
    aliases: tuple[AliasSymbol, ...] = ()
    functions: tuple[FunctionSymbol, ...] = ()
    unresolved: tuple[Symbol, ...] = ()         # Still Unknown at the end of the build

    properties: tuple[Member, ...] = ()
    methods: tuple[Method, ...] = ()
    parameters: tuple[Member, ...] = ()

    # id -> object
    symbol_map: Mapping[int, Symbol] = field(default_factory=lambda: MappingProxyType({}))
    class_map: Mapping[int, ClassSymbol] = field(default_factory=lambda: MappingProxyType({}))
    enum_map: Mapping[int, EnumSymbol] = field(default_factory=lambda: MappingProxyType({}))
    alias_map: Mapping[int, AliasSymbol] = field(default_factory=lambda: MappingProxyType({}))
    function_map: Mapping[int, FunctionSymbol] = field(default_factory=lambda: MappingProxyType({}))
    unknown_map: Mapping[int, Symbol] = field(default_factory=lambda: MappingProxyType({}))
    property_map: Mapping[int, Member] = field(default_factory=lambda: MappingProxyType({}))
    method_map: Mapping[int, Method] = field(default_factory=lambda: MappingProxyType({}))
    parameter_map: Mapping[int, Member] = field(default_factory=lambda: MappingProxyType({}))

    # Lowercased, name-sorted indexes
    symbol_names: tuple[NameEntry, ...] = ()
    class_names: tuple[NameEntry, ...] = ()
    enum_names: tuple[NameEntry, ...] = ()
    alias_names: tuple[NameEntry, ...] = ()
    function_names: tuple[NameEntry, ...] = ()
    unknown_names: tuple[NameEntry, ...] = ()
    property_names: tuple[NameEntry, ...] = ()
    method_names: tuple[NameEntry, ...] = ()
    parameter_names: tuple[NameEntry, ...] = ()

    file_lines: tuple[tuple[str, ...], ...] = ()
    diagnostics: tuple[Diagnostic, ...] = ()

    @property
    def symbols(self) -> tuple[Symbol, ...]:
        """All declared symbols: classes, enums, aliases, then functions."""
        return self.classes + self.enums + self.aliases + self.functions

    def get(self, symbol_id: int) -> Optional[Symbol]:
        return self.symbol_map.get(symbol_id)

    def find(self, name: str, kind: Optional[SymbolKind] = None) -> Optional[Symbol]:
        """Exact-name lookup; the lowest id wins when a name has several kinds."""
        for entry in self.find_by_prefix(name, kind):
            symbol = self.symbol_map[entry.id]
            if symbol.name == name:
                return symbol
        return None

    def names_for(self, kind: Optional[SymbolKind] = None) -> tuple[NameEntry, ...]:
        return {
            None: self.symbol_names,
            SymbolKind.CLASS: self.class_names,
            SymbolKind.ENUM: self.enum_names,
            SymbolKind.ALIAS: self.alias_names,
            SymbolKind.GLOBAL_FUNCTION: self.function_names,
            SymbolKind.UNKNOWN: self.unknown_names,
        }[kind]

    def find_by_prefix(self, prefix: str, kind: Optional[SymbolKind] = None) -> list[NameEntry]:
        """Case-insensitive prefix lookup on a name-sorted index."""
        index = self.names_for(kind)
        prefix = prefix.lower()
        start = bisect.bisect_left(index, prefix, key=lambda e: e.name)
        matches = []
        for entry in index[start:]:
            if not entry.name.startswith(prefix):
                break
            matches.append(entry)
        return matches

    def search(
        self,
        query: str,
        kinds: Optional[Iterable[SymbolKind]] = None,
        regex: bool = False,
        include_members: bool = False,
    ) -> SearchResult:
        """Match names by case-insensitive substring, or by regex.

        Raises ValueError for an invalid regular expression.
        """
        if not query:
            return SearchResult()

        if regex:
            try:
                pattern = re.compile(query)
            except re.error as e:
                raise ValueError(f"Invalid regex {query!r}: {e}") from e

            def matches(name: str) -> bool:
                return pattern.search(name) is not None
        else:
            query_lower = query.lower()

            def matches(name: str) -> bool:
                return query_lower in name.lower()

        wanted = set(kinds) if kinds is not None else {
            SymbolKind.CLASS, SymbolKind.ENUM, SymbolKind.ALIAS, SymbolKind.GLOBAL_FUNCTION,
        }
        symbols = [
            s for s in self.symbol_map.values()
            if s.kind in wanted and matches(s.name)
        ]

        if not include_members:
            return SearchResult(symbols=tuple(_by_name(symbols)))

        return SearchResult(
            symbols=tuple(_by_name(symbols)),
            properties=tuple(_by_name(p for p in self.properties if matches(p.name))),
            methods=tuple(_by_name(m for m in self.methods if matches(m.name))),
            parameters=tuple(_by_name(p for p in self.parameters if matches(p.name))),
        )

    def resolve_id(self, item_id: int) -> Optional[Referencer]:
        """Look up any id handed out during the build: symbol, method or member."""
        for mapping in (self.symbol_map, self.method_map, self.property_map, self.parameter_map):
            if item_id in mapping:
                return mapping[item_id]
        for enum in self.enums:
            for value in enum.values:
                if value.id == item_id:
                    return value
        return None

    def members_of(self, item_id: int) -> tuple[Union[Member, Method], ...]:
        """Properties and methods of a class, values of an enum, parameters of a function or method."""
        if item_id in self.method_map:
            return self.method_map[item_id].params
        symbol = self.symbol_map.get(item_id)
        if isinstance(symbol, ClassSymbol):
            return symbol.properties + symbol.methods
        if isinstance(symbol, EnumSymbol):
            return symbol.values
        if isinstance(symbol, FunctionSymbol):
            return symbol.params
        return ()

    def references_to(self, symbol_id: int) -> tuple[ReferenceEdge, ...]:
        symbol = self.symbol_map.get(symbol_id)
        return symbol.references if symbol is not None else ()

    def referencers(self, symbol_id: int) -> list[tuple[ReferenceEdge, Referencer]]:
        """Resolve each edge on a symbol to the property, method or function behind it."""
        resolved = []
        for edge in self.references_to(symbol_id):
            if edge.kind == EdgeKind.PROPERTY:
                target = self.property_map.get(edge.referencer_id)
            elif edge.kind == EdgeKind.PARAMETER:
                target = self.method_map.get(edge.referencer_id) or self.symbol_map.get(edge.referencer_id)
            elif edge.kind == EdgeKind.METHOD:
                target = self.method_map.get(edge.referencer_id)
            else:
                target = self.symbol_map.get(edge.referencer_id)
            if target is not None:
                resolved.append((edge, target))
        return resolved

    def lines_of(self, file: int, start: int, end: int) -> list[str]:
        """Raw lines `start`..`end` (1-indexed, inclusive) of a file."""
        if file < 0 or file >= len(self.file_lines):
            return []
        return list(self.file_lines[file][max(start - 1, 0):end])

    def stats(self) -> dict:
        return {
            "classes": len(self.classes),
            "enums": len(self.enums),
            "aliases": len(self.aliases),
            "functions": len(self.functions),
            "unresolved": len(self.unresolved),
            "properties": len(self.properties),
            "methods": len(self.methods),
            "parameters": len(self.parameters),
            "files": len(self.file_lines),
            "diagnostics": len(self.diagnostics),
        }


def assemble_database(
    registry: SymbolRegistry,
    properties: list[Member],
    methods: list[Method],
    parameters: list[Member],
    file_lines: list[list[str]],
    diagnostics: list[Diagnostic],
) -> SymbolDatabase:
    """Freeze the registry's final state into a SymbolDatabase."""
    frozen = [entry.freeze() for entry in sorted(registry, key=lambda e: e.id)]

    classes = [s for s in frozen if s.kind == SymbolKind.CLASS]
    enums = [s for s in frozen if s.kind == SymbolKind.ENUM]
    aliases = [s for s in frozen if s.kind == SymbolKind.ALIAS]
    functions = [s for s in frozen if s.kind == SymbolKind.GLOBAL_FUNCTION]
    unknowns = [s for s in frozen if s.kind == SymbolKind.UNKNOWN]

    return SymbolDatabase(
        classes=tuple(classes),
        enums=tuple(enums),
        aliases=tuple(aliases),
        functions=tuple(functions),
        unresolved=tuple(unknowns),
        properties=tuple(properties),
        methods=tuple(methods),
        parameters=tuple(parameters),
        symbol_map=_id_map(frozen),
        class_map=_id_map(classes),
        enum_map=_id_map(enums),
        alias_map=_id_map(aliases),
        function_map=_id_map(functions),
        unknown_map=_id_map(unknowns),
        property_map=_id_map(properties),
        method_map=_id_map(methods),
        parameter_map=_id_map(parameters),
        symbol_names=_name_index(classes + enums + aliases + functions),
        class_names=_name_index(classes),
        enum_names=_name_index(enums),
        alias_names=_name_index(aliases),
        function_names=_name_index(functions),
        unknown_names=_name_index(unknowns),
        property_names=_name_index(properties),
        method_names=_name_index(methods),
        parameter_names=_name_index(parameters),
        file_lines=tuple(tuple(lines) for lines in file_lines),
        diagnostics=tuple(diagnostics),
    )
