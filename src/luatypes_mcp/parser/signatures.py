"""Type signature parsing for annotation type expressions."""

import re
from types import MappingProxyType
from typing import Mapping, Optional

from .dialect import NAME, DialectSpec, LUA_ANNOTATIONS
from .registry import Reporter, SymbolRegistry
from .symbols import EMPTY_REFS, SignatureKind, TypeSignature


IDENTIFIER_RE = re.compile(rf"^{NAME}(?:\.{NAME})*$")
GENERIC_RE = re.compile(rf"^(?P<name>{NAME}(?:\.{NAME})*)\s*<")
NUMBER_RE = re.compile(r"^-?(?:0[xX][0-9a-fA-F]+|\d+(?:\.\d*)?(?:[eE][-+]?\d+)?)$")
RETURN_NAME_RE = re.compile(rf"^(?:{NAME}|\.\.\.)\??$")

OPENERS = {"<": ">", "(": ")", "[": "]", "{": "}"}
CLOSERS = {v: k for k, v in OPENERS.items()}


def split_top_level(text: str, separator: str) -> list[str]:
    """Split on `separator` only where no bracket or parenthesis is open."""
    parts = []
    depth = 0
    start = 0
    for i, char in enumerate(text):
        if char in OPENERS:
            depth += 1
        elif char in CLOSERS:
            depth -= 1
        elif char == separator and depth == 0:
            parts.append(text[start:i])
            start = i + 1
    parts.append(text[start:])
    return parts


def find_closing(text: str, open_index: int) -> int:
    """Index of the bracket closing the one at `open_index`, or -1 if unbalanced."""
    depth = 0
    for i in range(open_index, len(text)):
        char = text[i]
        if char in OPENERS:
            depth += 1
        elif char in CLOSERS:
            depth -= 1
            if depth == 0:
                return i
    return -1


def extract_type(line: str, start: int) -> Optional[str]:
    """Read one type expression from `line` starting at `start`.

    The type ends at the first whitespace outside brackets, except that
    whitespace next to `|`, `,` or `:` is part of the type
    (e.g. "Foo | Bar", "fun(a: int): string").
    """
    text = line[start:].strip()
    depth = 0
    end = len(text)
    for i, char in enumerate(text):
        if char in OPENERS:
            depth += 1
        elif char in CLOSERS:
            depth -= 1
        elif char.isspace() and depth == 0:
            before = text[:i].rstrip()
            after = text[i:].lstrip()
            if before.endswith(("|", ",", ":")) or after.startswith(("|", ",", ":")):
                continue
            end = i
            break
    type_str = text[:end].strip()
    return type_str or None


def split_return_values(text: str) -> list[str]:
    """Types of a return marker's comma-separated values.

    Each value is `Type [name]`; a value followed by more than a name
    starts the description, so no later value is read.
    """
    types = []
    for part in split_top_level(text, ","):
        type_str = extract_type(part, 0)
        if not type_str:
            break
        types.append(type_str)
        rest = part.strip()[len(type_str):].split()
        if rest and (len(rest) > 1 or not RETURN_NAME_RE.match(rest[0])):
            break
    return types


def merge_refs(*signatures: TypeSignature) -> Mapping[str, int]:
    merged: dict[str, int] = {}
    for signature in signatures:
        merged.update(signature.refs)
    if not merged:
        return EMPTY_REFS
    return MappingProxyType(merged)


def optional_of(signature: TypeSignature) -> TypeSignature:
    """Wrap a signature as optional (no-op if it already is)."""
    if signature.is_optional:
        return signature
    return TypeSignature(
        raw=signature.raw,
        kind=SignatureKind.OPTIONAL,
        name=signature.name,
        subtypes=(signature,),
        refs=signature.refs,
        is_optional=True,
    )


class SignatureParser:
    """Parses raw type strings, resolving non-primitive tokens through the registry."""

    def __init__(
        self,
        registry: SymbolRegistry,
        dialect: DialectSpec = LUA_ANNOTATIONS,
        report: Optional[Reporter] = None,
    ):
        self.registry = registry
        self.dialect = dialect
        self._report = report

    def parse(self, raw_type: str, file: int = 0, line: int = 0) -> TypeSignature:
        return self._parse(raw_type.strip(), file, line)

    def primitive(self, name: str) -> TypeSignature:
        return TypeSignature(raw=name, kind=SignatureKind.PRIMITIVE, name=name)

    def _parse(self, text: str, file: int, line: int) -> TypeSignature:
        if not text:
            self._diagnostic("missing-type", "Empty type expression", file, line)
            return self.primitive("any")

        if text.startswith("(") and find_closing(text, 0) == len(text) - 1:
            inner = self._parse(text[1:-1].strip(), file, line)
            return _with_raw(inner, text)

        # A fun() return type takes the whole union after its colon
        prefix = self.dialect.function_prefix
        if text.startswith(prefix):
            close_index = find_closing(text, len(prefix) - 1)
            if close_index != -1 and text[close_index + 1:].lstrip().startswith(":"):
                return self._parse_function(text, file, line)

        alternatives = split_top_level(text, "|")
        if len(alternatives) > 1:
            return self._parse_union(text, alternatives, file, line)

        if text.endswith("?"):
            inner = self._parse(text[:-1].strip(), file, line)
            return _with_raw(optional_of(inner), text)

        if text.endswith("[]"):
            inner = self._parse(text[:-2].strip(), file, line)
            return TypeSignature(
                raw=text,
                kind=SignatureKind.ARRAY,
                name="array",
                subtypes=(inner,),
                refs=inner.refs,
            )

        if text.startswith(self.dialect.function_prefix):
            return self._parse_function(text, file, line)

        generic = GENERIC_RE.match(text)
        if generic:
            return self._parse_generic(text, generic.group("name"), generic.end() - 1, file, line)

        if _is_literal(text):
            return self.primitive(text)

        if IDENTIFIER_RE.match(text):
            return self._parse_identifier(text, file, line)

        self._diagnostic("unrecognized-type", f"Unrecognized type expression: {text}", file, line)
        return self.primitive(text)

    def _parse_union(self, text: str, parts: list[str], file: int, line: int) -> TypeSignature:
        alternatives = []
        is_optional = False
        for part in parts:
            alternative = self._parse(part.strip(), file, line)
            if alternative.is_optional or alternative.name == self.dialect.nil_type:
                is_optional = True
            if alternative.kind == SignatureKind.OPTIONAL:
                alternative = alternative.subtypes[0]
            alternatives.append(alternative)
        return TypeSignature(
            raw=text,
            kind=SignatureKind.UNION,
            name="union",
            subtypes=tuple(alternatives),
            refs=merge_refs(*alternatives),
            is_optional=is_optional,
        )

    def _parse_generic(self, text: str, name: str, open_index: int, file: int, line: int) -> TypeSignature:
        dialect = self.dialect
        if name in dialect.array_containers:
            kind, arity = SignatureKind.ARRAY, (1,)
        elif name in dialect.map_containers:
            kind, arity = SignatureKind.MAP, (2,)
        elif name in dialect.set_containers:
            kind, arity = SignatureKind.SET, (1,)
        else:
            kind, arity = SignatureKind.SYMBOL_REFERENCE, None

        close_index = find_closing(text, open_index)
        content = text[open_index + 1:close_index].strip() if close_index != -1 else ""
        args = [a.strip() for a in split_top_level(content, ",")] if content else []

        malformed = (
            close_index != len(text) - 1
            or not args
            or any(not a for a in args)
            or (arity is not None and len(args) not in arity)
        )
        if malformed:
            self._diagnostic("malformed-generic", f"Malformed generic type: {text}", file, line)
            if kind == SignatureKind.SYMBOL_REFERENCE:
                return self._parse_identifier(name, file, line, raw=text)
            return TypeSignature(raw=text, kind=kind, name=name)

        subtypes = tuple(self._parse(arg, file, line) for arg in args)

        if kind == SignatureKind.SYMBOL_REFERENCE:
            base = self._parse_identifier(name, file, line)
            return TypeSignature(
                raw=text,
                kind=base.kind,
                name=name,
                subtypes=subtypes,
                refs=merge_refs(base, *subtypes),
            )

        return TypeSignature(
            raw=text,
            kind=kind,
            name=name,
            subtypes=subtypes,
            refs=merge_refs(*subtypes),
        )

    def _parse_function(self, text: str, file: int, line: int) -> TypeSignature:
        """Harvest references from fun(...) parameter and return types."""
        open_index = len(self.dialect.function_prefix) - 1
        close_index = find_closing(text, open_index)
        if close_index == -1:
            self._diagnostic("malformed-generic", f"Unbalanced function type: {text}", file, line)
            return TypeSignature(raw=text, kind=SignatureKind.FUNCTION, name="function")

        harvested = []
        for param in split_top_level(text[open_index + 1:close_index], ","):
            pieces = split_top_level(param, ":")
            if len(pieces) > 1 and pieces[1].strip():
                harvested.append(self._parse(":".join(pieces[1:]).strip(), file, line))

        rest = text[close_index + 1:].strip()
        if rest.startswith(":"):
            for ret in split_top_level(rest[1:].strip(), ","):
                pieces = split_top_level(ret, ":")
                ret_type = pieces[-1].strip()
                if ret_type:
                    harvested.append(self._parse(ret_type, file, line))

        return TypeSignature(
            raw=text,
            kind=SignatureKind.FUNCTION,
            name="function",
            refs=merge_refs(*harvested),
        )

    def _parse_identifier(self, name: str, file: int, line: int, raw: Optional[str] = None) -> TypeSignature:
        if name in self.dialect.primitive_types:
            return TypeSignature(raw=raw or name, kind=SignatureKind.PRIMITIVE, name=name)
        entry = self.registry.resolve(name, line, file)
        return TypeSignature(
            raw=raw or name,
            kind=SignatureKind.SYMBOL_REFERENCE,
            name=name,
            refs=MappingProxyType({name: entry.id}),
        )

    def _diagnostic(self, code: str, message: str, file: int, line: int) -> None:
        if self._report is not None:
            self._report(code, message, file, line)


def _with_raw(signature: TypeSignature, raw: str) -> TypeSignature:
    if signature.raw == raw:
        return signature
    return TypeSignature(
        raw=raw,
        kind=signature.kind,
        name=signature.name,
        subtypes=signature.subtypes,
        refs=signature.refs,
        is_optional=signature.is_optional,
    )


def _is_literal(text: str) -> bool:
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "\"'`":
        return True
    if text.startswith("{") and text.endswith("}"):
        return True
    return text in ("true", "false") or bool(NUMBER_RE.match(text))
