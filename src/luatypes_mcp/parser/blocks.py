"""Per-kind block parsers for class, enum, alias, method and function declarations.

Each parser receives the file's lines, the index of the line holding its
marker and the marker's regex match, and returns the index of the last line
it consumed.
"""

import logging
import re
from typing import Optional

from .dialect import BLOCK_TERMINATORS, DialectSpec, LUA_ANNOTATIONS
from .references import ReferenceTracker
from .registry import Reporter, SymbolRegistry
from .signatures import SignatureParser, extract_type, optional_of, split_return_values, split_top_level
from .symbols import (
    EdgeKind,
    Member,
    MemberKind,
    Method,
    SymbolEntry,
    SymbolKind,
    TypeSignature,
)


logger = logging.getLogger(__name__)

INTEGER_RE = re.compile(r"^-?(?:0[xX][0-9a-fA-F]+|\d+)$")
FLOAT_RE = re.compile(r"^-?\d*\.\d+(?:[eE][-+]?\d+)?$")


class BlockParser:
    """Consumes declaration blocks and accumulates symbols and members."""

    def __init__(
        self,
        registry: SymbolRegistry,
        tracker: ReferenceTracker,
        signatures: SignatureParser,
        report: Reporter,
        dialect: DialectSpec = LUA_ANNOTATIONS,
    ):
        self.registry = registry
        self.tracker = tracker
        self.signatures = signatures
        self.report = report
        self.dialect = dialect

        # Creation-order accumulators for the database assembler
        self.properties: list[Member] = []
        self.methods: list[Method] = []
        self.parameters: list[Member] = []

    # -- Class -------------------------------------------------------------

    def parse_class(self, lines: list[str], index: int, match: re.Match, file: int) -> int:
        name = match.group("name")
        parent_name = match.group("parent")
        line_no = index + 1

        parent = self.registry.resolve(parent_name, line_no, file) if parent_name else None
        entry = self.registry.get_or_create(SymbolKind.CLASS, name, line_no, file)

        if parent is not None:
            if parent.id == entry.id:
                self.report("self-parent", f"Class {name} lists itself as parent", file, line_no)
            else:
                entry.parent = parent.id
                if entry.id not in parent.children:
                    parent.children.append(entry.id)

        i = index + 1
        while i < len(lines):
            line = lines[i]
            marker = self.dialect.classify_line(line)
            if marker is not None:
                marker_name, marker_match = marker
                if marker_name in BLOCK_TERMINATORS:
                    break
                self.parse_method(lines, i, marker_match, file, current=entry)
            else:
                field_match = self.dialect.field_pattern.match(line)
                if field_match:
                    self._add_property(entry, line, field_match, file, i + 1)
            i += 1

        end = i - 1
        if _declared_here(entry, file, line_no):
            entry.line_end = end + 1
        return end

    def _add_property(self, entry: SymbolEntry, line: str, match: re.Match, file: int, line_no: int) -> None:
        name = match.group("name")
        type_str = extract_type(line, match.end())
        if not type_str:
            self.report("missing-type", f"Field {entry.name}.{name} has no type", file, line_no)
            return

        signature = self.signatures.parse(type_str, file, line_no)
        if match.group("optional"):
            signature = optional_of(signature)

        prop = Member(
            id=self.registry.next_id(),
            kind=MemberKind.PROPERTY,
            parent=entry.id,
            name=name,
            raw_type=type_str,
            signature=signature,
            file=file,
            line=line_no,
        )
        entry.properties.append(prop)
        self.properties.append(prop)
        self.tracker.track(EdgeKind.PROPERTY, prop.id, signature)

    # -- Methods and global functions ----------------------------------------

    def parse_method(
        self,
        lines: list[str],
        index: int,
        match: re.Match,
        file: int,
        current: Optional[SymbolEntry] = None,
    ) -> int:
        owner_name = match.group("owner")
        name = match.group("name")
        line_no = index + 1

        if current is not None and current.name == owner_name:
            owner = current
        else:
            owner = self.registry.find(owner_name, SymbolKind.CLASS)
        if owner is None:
            self.report(
                "unknown-owner",
                f"Method {owner_name}{match.group('sep')}{name} found for unknown class {owner_name}",
                file,
                line_no,
            )
            return index

        method_id = self.registry.next_id()
        params, returns, extra_returns, description = self._collect_signature(
            lines, index, match, method_id, file
        )
        method = Method(
            id=method_id,
            parent=owner.id,
            name=name,
            params=tuple(params),
            returns=returns,
            extra_returns=tuple(extra_returns),
            signature=lines[index].strip(),
            description=description,
            file=file,
            line=line_no,
        )
        owner.methods.append(method)
        self.methods.append(method)

        for param in params:
            self.tracker.track(EdgeKind.PARAMETER, method_id, param.signature)
        for signature in (returns, *extra_returns):
            self.tracker.track(EdgeKind.METHOD, method_id, signature)
        return index

    def parse_function(self, lines: list[str], index: int, match: re.Match, file: int) -> int:
        name = match.group("name")
        line_no = index + 1

        entry = self.registry.get_or_create(SymbolKind.GLOBAL_FUNCTION, name, line_no, file)
        if entry.returns is not None:
            self.report(
                "duplicate-declaration",
                f"Function {name} already declared at file {entry.file} line {entry.line_start}",
                file,
                line_no,
            )
            return index

        params, returns, extra_returns, description = self._collect_signature(
            lines, index, match, entry.id, file
        )
        entry.params = params
        entry.returns = returns
        entry.extra_returns = extra_returns
        entry.signature = lines[index].strip()
        entry.description = description
        entry.line_end = entry.line_start

        for param in params:
            self.tracker.track(EdgeKind.PARAMETER, entry.id, param.signature)
        for signature in (returns, *extra_returns):
            self.tracker.track(EdgeKind.GLOBAL_FUNCTION, entry.id, signature)
        return index

    def _collect_signature(
        self,
        lines: list[str],
        index: int,
        match: re.Match,
        owner_id: int,
        file: int,
    ) -> tuple[list[Member], TypeSignature, list[TypeSignature], str]:
        """Build parameters, return signatures and description for a declaration.

        Walks upward from the line above the declaration over parameter,
        return, doc-comment and modifier lines, stopping at the first other
        line. The walk yields lines bottom-up; they are reversed into file order.

        The first value of the last return marker is the return signature;
        every other return value is parsed into the extra returns.
        """
        dialect = self.dialect
        collected = []
        j = index - 1
        while j >= 0:
            line = lines[j]
            param_match = dialect.param_pattern.match(line)
            return_match = dialect.return_pattern.match(line)
            doc_match = dialect.doc_comment_pattern.match(line)
            if param_match:
                collected.append(("param", j, param_match))
            elif return_match:
                collected.append(("return", j, return_match))
            elif doc_match:
                collected.append(("doc", j, doc_match))
            elif not dialect.modifier_pattern.match(line):
                break
            j -= 1
        collected.reverse()

        params: list[Member] = []
        return_values: list[tuple[str, int]] = []
        chosen: Optional[int] = None
        doc_lines = []

        for kind, line_index, line_match in collected:
            line = lines[line_index]
            line_no = line_index + 1
            if kind == "doc":
                doc_lines.append(line_match.group("text").strip())
            elif kind == "param":
                param = self._make_param(line, line_match, owner_id, file, line_no)
                if param is not None:
                    params.append(param)
            else:
                types = split_return_values(line[line_match.end():])
                if not types:
                    self.report("missing-type", "Return marker has no type", file, line_no)
                    continue
                if chosen is not None:
                    logger.debug("Return marker at line %d replaces the one above", line_no)
                chosen = len(return_values)
                return_values.extend((type_str, line_no) for type_str in types)

        if not params and not any(kind == "param" for kind, _, _ in collected):
            params = self._params_from_args(match.group("args"), owner_id, file, index + 1)

        parsed = [self.signatures.parse(type_str, file, line_no) for type_str, line_no in return_values]
        if chosen is None:
            returns = self.signatures.primitive(self.dialect.void_type)
            extra_returns = []
        else:
            returns = parsed[chosen]
            extra_returns = parsed[:chosen] + parsed[chosen + 1:]

        description = "\n".join(doc_lines).strip()
        return params, returns, extra_returns, description

    def _make_param(self, line: str, match: re.Match, owner_id: int, file: int, line_no: int) -> Optional[Member]:
        name = match.group("name")
        type_str = extract_type(line, match.end())
        if not type_str:
            self.report("missing-type", f"Parameter {name} has no type", file, line_no)
            return None

        signature = self.signatures.parse(type_str, file, line_no)
        if match.group("optional"):
            signature = optional_of(signature)

        param = Member(
            id=self.registry.next_id(),
            kind=MemberKind.PARAMETER,
            parent=owner_id,
            name=name,
            raw_type=type_str,
            signature=signature,
            file=file,
            line=line_no,
        )
        self.parameters.append(param)
        return param

    def _params_from_args(self, args: str, owner_id: int, file: int, line_no: int) -> list[Member]:
        """Untyped parameters taken from the declaration's argument list."""
        params = []
        for arg in args.split(","):
            name = arg.strip()
            if not name or name in self.dialect.implicit_params:
                continue
            param = Member(
                id=self.registry.next_id(),
                kind=MemberKind.PARAMETER,
                parent=owner_id,
                name=name,
                raw_type="any",
                signature=self.signatures.primitive("any"),
                file=file,
                line=line_no,
            )
            params.append(param)
            self.parameters.append(param)
        return params

    # -- Enum --------------------------------------------------------------

    def parse_enum(self, lines: list[str], index: int, match: re.Match, file: int) -> int:
        name = match.group("name")
        line_no = index + 1
        entry = self.registry.get_or_create(SymbolKind.ENUM, name, line_no, file)

        opened = False
        end = None
        i = index + 1
        while i < len(lines):
            line = lines[i]
            if self.dialect.is_top_level(line):
                self.report("unterminated-enum", f"Enum {name} has no closing brace", file, line_no)
                end = i - 1
                break

            if opened:
                body = line
            elif "{" in line:
                opened = True
                body = line.split("{", 1)[1]
            else:
                i += 1
                continue

            body = body.split("--", 1)[0]
            closed = "}" in body
            for piece in split_top_level(body.split("}", 1)[0], ","):
                self._add_enum_value(entry, piece, file, i + 1)
            if closed:
                end = i
                break
            i += 1

        if end is None:
            self.report("unterminated-enum", f"Enum {name} runs to end of file", file, line_no)
            end = len(lines) - 1

        if _declared_here(entry, file, line_no):
            entry.line_end = end + 1
        return end

    def _add_enum_value(self, entry: SymbolEntry, text: str, file: int, line_no: int) -> None:
        value_match = self.dialect.enum_value_pattern.match(text)
        if not value_match:
            return

        name = value_match.group("name") or value_match.group("qname")
        value = value_match.group("value").strip()
        raw_type = _literal_type(value)

        member = Member(
            id=self.registry.next_id(),
            kind=MemberKind.ENUM_VALUE,
            parent=entry.id,
            name=name,
            raw_type=raw_type,
            signature=self.signatures.primitive(raw_type),
            value=value,
            file=file,
            line=line_no,
        )
        entry.values.append(member)

    # -- Alias -------------------------------------------------------------

    def parse_alias(self, lines: list[str], index: int, match: re.Match, file: int) -> int:
        name = match.group("name")
        inline = match.group("type")
        line_no = index + 1
        entry = self.registry.get_or_create(SymbolKind.ALIAS, name, line_no, file)

        if inline:
            type_str = extract_type(inline, 0)
            if type_str:
                self._add_alias_value(entry, type_str, file, line_no)
            else:
                self.report("unresolved-alias", f"Alias {name} has no target type", file, line_no)
            return index

        i = index + 1
        while i < len(lines):
            line = lines[i]
            if self.dialect.is_top_level(line):
                break
            option_match = self.dialect.alias_option_pattern.match(line)
            if option_match and option_match.group("option"):
                self._add_alias_option(entry, option_match.group("option"), file, i + 1)
            i += 1

        end = i - 1
        if not entry.alias_values:
            self.report("unresolved-alias", f"Alias {name} has no options", file, line_no)
        if _declared_here(entry, file, line_no):
            entry.line_end = end + 1
        return end

    def _add_alias_option(self, entry: SymbolEntry, option: str, file: int, line_no: int) -> None:
        if len(option) >= 2 and option[0] == option[-1] == "`":
            literal = option[1:-1].strip()
            entry.alias_values.append(literal)
            entry.alias_signatures.append(self.signatures.primitive(literal))
            return
        type_str = extract_type(option, 0)
        if type_str:
            self._add_alias_value(entry, type_str, file, line_no)

    def _add_alias_value(self, entry: SymbolEntry, type_str: str, file: int, line_no: int) -> None:
        entry.alias_values.append(type_str)
        entry.alias_signatures.append(self.signatures.parse(type_str, file, line_no))


def _declared_here(entry: SymbolEntry, file: int, line_no: int) -> bool:
    """True if `entry`'s recorded location is this declaration (not an earlier one)."""
    return entry.file == file and entry.line_start == line_no


def _literal_type(value: str) -> str:
    if INTEGER_RE.match(value):
        return "integer"
    if FLOAT_RE.match(value):
        return "number"
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return "string"
    if value in ("true", "false"):
        return "boolean"
    return "any"
