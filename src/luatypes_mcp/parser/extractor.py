"""Line scanner that builds a symbol database from annotation files."""

import logging
import re
from typing import Callable

from .blocks import BlockParser
from .database import SymbolDatabase, assemble_database
from .dialect import (
    ALIAS_MARKER,
    CLASS_MARKER,
    ENUM_MARKER,
    FUNCTION_MARKER,
    METHOD_MARKER,
    DialectSpec,
    LUA_ANNOTATIONS,
)
from .references import ReferenceTracker
from .registry import DiagnosticLog, SymbolRegistry
from .signatures import SignatureParser


logger = logging.getLogger(__name__)

Handler = Callable[[list[str], int, re.Match, int], int]


def split_lines(text: str) -> list[str]:
    """Split raw file content on newlines, dropping carriage returns."""
    return [line.rstrip("\r") for line in text.split("\n")]


class TypeExtractor:
    """Single-use builder: one registry, one pass over the given files."""

    def __init__(self, dialect: DialectSpec = LUA_ANNOTATIONS):
        self.dialect = dialect
        self.diagnostics = DiagnosticLog()
        self.registry = SymbolRegistry(report=self.diagnostics.report)
        self.tracker = ReferenceTracker(self.registry)
        self.signatures = SignatureParser(self.registry, dialect, self.diagnostics.report)
        self.blocks = BlockParser(
            self.registry,
            self.tracker,
            self.signatures,
            self.diagnostics.report,
            dialect,
        )
        self.handlers: dict[str, Handler] = {
            CLASS_MARKER: self.blocks.parse_class,
            ENUM_MARKER: self.blocks.parse_enum,
            ALIAS_MARKER: self.blocks.parse_alias,
            METHOD_MARKER: self.blocks.parse_method,
            FUNCTION_MARKER: self.blocks.parse_function,
        }
        self._built = False

    def build(self, files: list[str]) -> SymbolDatabase:
        """Scan every file in order and return the frozen database."""
        if self._built:
            raise RuntimeError("TypeExtractor instances build exactly once")
        self._built = True

        logger.info("Starting type extraction over %d file(s)", len(files))
        file_lines = [split_lines(text) for text in files]

        for file_index, lines in enumerate(file_lines):
            self.scan_file(lines, file_index)

        database = assemble_database(
            self.registry,
            self.blocks.properties,
            self.blocks.methods,
            self.blocks.parameters,
            file_lines,
            self.diagnostics.entries,
        )
        self._log_stats(database)
        return database

    def scan_file(self, lines: list[str], file_index: int) -> None:
        """Dispatch each top-level marker line to its block parser.

        A block parser returns the last line it consumed; scanning resumes
        on the line after it.
        """
        i = 0
        while i < len(lines):
            marker = self.dialect.classify_line(lines[i])
            if marker is not None:
                name, match = marker
                consumed = self.handlers[name](lines, i, match, file_index)
                i = max(consumed, i)
            i += 1

    def _log_stats(self, database: SymbolDatabase) -> None:
        stats = database.stats()
        logger.info(
            "Extracted %d classes, %d enums, %d aliases, %d global functions, %d methods",
            stats["classes"],
            stats["enums"],
            stats["aliases"],
            stats["functions"],
            stats["methods"],
        )
        logger.info("Recorded %d reference edges", self.tracker.edge_count)
        if database.unresolved:
            logger.info(
                "%d unresolved type name(s): %s",
                len(database.unresolved),
                ", ".join(s.name for s in database.unresolved[:20]),
            )
        if database.diagnostics:
            logger.info("%d diagnostic(s) recorded", len(database.diagnostics))


def build_database(files: list[str], dialect: DialectSpec = LUA_ANNOTATIONS) -> SymbolDatabase:
    """Build a symbol database from raw file contents.

    Args:
        files: Raw text of each declaration file, in processing order.
            Symbols record their origin as an index into this list.
        dialect: Annotation dialect (defaults to LuaLS-style annotations)

    Returns:
        Immutable SymbolDatabase; empty for an empty list
    """
    return TypeExtractor(dialect).build(files)
