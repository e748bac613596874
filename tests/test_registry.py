"""Tests for the symbol registry and reference tracker."""

from luatypes_mcp.parser import (
    DiagnosticLog,
    EdgeKind,
    ReferenceEdge,
    ReferenceTracker,
    SignatureParser,
    SymbolKind,
    SymbolRegistry,
)


def test_promotion_keeps_id_and_edges():
    registry = SymbolRegistry()
    placeholder = registry.resolve("Foo", 3, 0)
    edge = ReferenceEdge(referencer_id=99, kind=EdgeKind.PROPERTY)
    placeholder.add_reference(edge)

    cls = registry.get_or_create(SymbolKind.CLASS, "Foo", 10, 1)

    assert cls is placeholder
    assert cls.kind == SymbolKind.CLASS
    assert (cls.file, cls.line_start, cls.line_end) == (1, 10, 10)
    assert list(cls.references) == [edge]
    assert registry.find("Foo", SymbolKind.UNKNOWN) is None
    assert registry.find("Foo", SymbolKind.CLASS) is cls


def test_promotion_is_idempotent():
    registry = SymbolRegistry()
    cls = registry.get_or_create(SymbolKind.CLASS, "Foo", 10, 0)
    again = registry.get_or_create(SymbolKind.CLASS, "Foo", 20, 0)

    assert again is cls
    assert again.line_start == 10
    assert len(registry) == 1


def test_resolve_returns_declared_symbol():
    registry = SymbolRegistry()
    enum = registry.get_or_create(SymbolKind.ENUM, "Color", 1, 0)

    assert registry.resolve("Color", 5, 0) is enum
    assert len(registry) == 1


def test_resolve_reuses_placeholder():
    registry = SymbolRegistry()
    first = registry.resolve("Missing", 1, 0)
    second = registry.resolve("Missing", 9, 2)

    assert first is second
    assert first.kind == SymbolKind.UNKNOWN
    assert first.line_start == 1


def test_edges_are_a_set():
    registry = SymbolRegistry()
    edge = ReferenceEdge(referencer_id=4, kind=EdgeKind.PARAMETER)

    registry.get_or_create(SymbolKind.UNKNOWN, "Foo", 1, 0, referenced_by=edge)
    entry = registry.get_or_create(SymbolKind.UNKNOWN, "Foo", 2, 0, referenced_by=edge)

    assert entry.add_reference(edge) is False
    assert list(entry.references) == [edge]

    other = ReferenceEdge(referencer_id=4, kind=EdgeKind.METHOD)
    assert entry.add_reference(other) is True
    assert len(entry.references) == 2


def test_kind_conflict_is_reported():
    log = DiagnosticLog()
    registry = SymbolRegistry(report=log.report)

    cls = registry.get_or_create(SymbolKind.CLASS, "Dup", 1, 0)
    enum = registry.get_or_create(SymbolKind.ENUM, "Dup", 5, 0)

    assert enum.id != cls.id
    assert [d.code for d in log.entries] == ["kind-conflict"]
    assert log.entries[0].line == 5
    assert registry.lookup("Dup") is cls
    assert registry.find("Dup", SymbolKind.ENUM) is enum


def test_ids_are_shared_and_unique():
    registry = SymbolRegistry()
    a = registry.get_or_create(SymbolKind.CLASS, "A", 1, 0)
    member_id = registry.next_id()
    b = registry.resolve("B", 2, 0)

    assert len({a.id, member_id, b.id}) == 3
    assert registry.get(member_id) is None
    assert registry.get(b.id) is b


def test_tracker_adds_one_edge_per_symbol():
    registry = SymbolRegistry()
    tracker = ReferenceTracker(registry)
    parser = SignatureParser(registry)

    sig = parser.parse("TMap<Foo, TArray<Foo|Bar>>")

    assert tracker.track(EdgeKind.PROPERTY, 50, sig) == 2
    assert tracker.track(EdgeKind.PROPERTY, 50, sig) == 0
    assert tracker.edge_count == 2

    foo = registry.find("Foo", SymbolKind.UNKNOWN)
    assert list(foo.references) == [ReferenceEdge(referencer_id=50, kind=EdgeKind.PROPERTY)]


def test_tracker_ignores_primitive_signature():
    registry = SymbolRegistry()
    tracker = ReferenceTracker(registry)

    assert tracker.track(EdgeKind.METHOD, 1, SignatureParser(registry).primitive("void")) == 0
