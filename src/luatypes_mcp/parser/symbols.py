"""Symbol, member and type signature dataclasses."""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional


class SymbolKind(str, Enum):
    """Kind discriminant for every symbol in the database."""
    CLASS = "Class"
    ENUM = "Enum"
    ALIAS = "Alias"
    GLOBAL_FUNCTION = "GlobalFunction"
    UNKNOWN = "Unknown"


class MemberKind(str, Enum):
    PROPERTY = "property"
    PARAMETER = "parameter"
    ENUM_VALUE = "enum-value"


class SignatureKind(str, Enum):
    PRIMITIVE = "primitive"
    ARRAY = "array"
    MAP = "map"
    SET = "set"
    UNION = "union"
    OPTIONAL = "optional"
    FUNCTION = "function"
    SYMBOL_REFERENCE = "symbol-reference"


class EdgeKind(str, Enum):
    """What kind of declaration mentions the referenced symbol."""
    PROPERTY = "property"
    PARAMETER = "parameter"
    METHOD = "method"
    GLOBAL_FUNCTION = "global-function"


EMPTY_REFS: Mapping[str, int] = MappingProxyType({})


@dataclass(frozen=True)
class TypeSignature:
    """A parsed type expression."""
    raw: str                                    # Text as written (e.g. "TMap<FName, UObject>")
    kind: SignatureKind
    name: str = ""                              # Primitive or referenced name, container name for generics
    subtypes: tuple["TypeSignature", ...] = ()  # Nested parts (container args, union alternatives)
    refs: Mapping[str, int] = field(default_factory=lambda: EMPTY_REFS)  # Type token -> symbol id, nested tokens included
    is_optional: bool = False

    @property
    def is_primitive(self) -> bool:
        return not self.refs


@dataclass(frozen=True)
class ReferenceEdge:
    """Directed edge: `referencer_id` mentions the symbol holding this edge."""
    referencer_id: int
    kind: EdgeKind


@dataclass(frozen=True)
class Member:
    """A property, parameter or enum value."""
    id: int
    kind: MemberKind
    parent: int                     # Owning class/enum id, or method/function id for parameters
    name: str
    raw_type: str
    signature: TypeSignature
    value: Optional[str] = None     # Literal value (enum values only)
    file: int = 0
    line: int = 0                   # 1-indexed


@dataclass(frozen=True)
class Method:
    """A method declared on a class."""
    id: int
    parent: int                     # Owning class id
    name: str
    params: tuple[Member, ...]
    returns: TypeSignature
    extra_returns: tuple[TypeSignature, ...] = ()   # Other return values, file order
    signature: str = ""             # Declaration line (e.g. "function Foo:bar(a, b)")
    description: str = ""
    file: int = 0
    line: int = 0


@dataclass(frozen=True)
class Diagnostic:
    """A recoverable parse anomaly."""
    code: str                       # "malformed-generic" | "missing-type" | "unresolved-alias" | ...
    message: str
    file: int
    line: int


@dataclass(frozen=True)
class Symbol:
    """A declared or referenced name."""
    id: int
    name: str
    kind: SymbolKind
    file: int
    line_start: int                 # 1-indexed
    line_end: int
    references: tuple[ReferenceEdge, ...] = ()

    @property
    def ref_count(self) -> int:
        return len(self.references)


@dataclass(frozen=True)
class ClassSymbol(Symbol):
    parent: Optional[int] = None
    has_parent: bool = False
    children: tuple[int, ...] = ()
    properties: tuple[Member, ...] = ()
    methods: tuple[Method, ...] = ()


@dataclass(frozen=True)
class EnumSymbol(Symbol):
    values: tuple[Member, ...] = ()


@dataclass(frozen=True)
class AliasSymbol(Symbol):
    values: tuple[str, ...] = ()                    # Raw type strings the alias may stand for
    signatures: tuple[TypeSignature, ...] = ()      # Parsed form of each value


@dataclass(frozen=True)
class FunctionSymbol(Symbol):
    params: tuple[Member, ...] = ()
    returns: Optional[TypeSignature] = None
    extra_returns: tuple[TypeSignature, ...] = ()
    signature: str = ""
    description: str = ""


@dataclass(frozen=True)
class NameEntry:
    """Entry of a name-sorted lookup index."""
    name: str                       # Lowercased name
    id: int


@dataclass
class SymbolEntry:
    """Mutable registry record for a symbol while the build is running.

    Frozen into one of the Symbol dataclasses by the database assembler.
    """
    id: int
    name: str
    kind: SymbolKind
    file: int
    line_start: int
    line_end: int
    references: dict[ReferenceEdge, None] = field(default_factory=dict)
    parent: Optional[int] = None
    children: list[int] = field(default_factory=list)
    properties: list[Member] = field(default_factory=list)
    methods: list[Method] = field(default_factory=list)
    values: list[Member] = field(default_factory=list)
    alias_values: list[str] = field(default_factory=list)
    alias_signatures: list[TypeSignature] = field(default_factory=list)
    params: list[Member] = field(default_factory=list)
    returns: Optional[TypeSignature] = None
    extra_returns: list[TypeSignature] = field(default_factory=list)
    signature: str = ""
    description: str = ""

    def add_reference(self, edge: ReferenceEdge) -> bool:
        """Add an edge; returns False if it was already recorded."""
        if edge in self.references:
            return False
        self.references[edge] = None
        return True

    def freeze(self) -> Symbol:
        """Snapshot this entry as the immutable dataclass for its kind."""
        base = dict(
            id=self.id,
            name=self.name,
            kind=self.kind,
            file=self.file,
            line_start=self.line_start,
            line_end=self.line_end,
            references=tuple(self.references),
        )
        if self.kind == SymbolKind.CLASS:
            return ClassSymbol(
                **base,
                parent=self.parent,
                has_parent=self.parent is not None,
                children=tuple(self.children),
                properties=tuple(self.properties),
                methods=tuple(self.methods),
            )
        if self.kind == SymbolKind.ENUM:
            return EnumSymbol(**base, values=tuple(self.values))
        if self.kind == SymbolKind.ALIAS:
            return AliasSymbol(
                **base,
                values=tuple(self.alias_values),
                signatures=tuple(self.alias_signatures),
            )
        if self.kind == SymbolKind.GLOBAL_FUNCTION:
            return FunctionSymbol(
                **base,
                params=tuple(self.params),
                returns=self.returns,
                extra_returns=tuple(self.extra_returns),
                signature=self.signature,
                description=self.description,
            )
        return Symbol(**base)
