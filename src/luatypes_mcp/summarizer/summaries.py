"""Two-tier summarization: description > signature fallback."""

from ..parser.symbols import (
    AliasSymbol,
    ClassSymbol,
    EnumSymbol,
    FunctionSymbol,
    Method,
    Symbol,
    SymbolKind,
)


def extract_summary_from_description(description: str) -> str:
    """Extract first sentence from a doc-comment description (Tier 1).

    Takes the first line and truncates at first period.
    """
    if not description:
        return ""

    first_line = description.strip().split("\n")[0].strip()

    if "." in first_line:
        first_line = first_line[:first_line.index(".") + 1]

    return first_line[:120]


def signature_fallback(symbol) -> str:
    """Generate summary from the declaration when there is no description (Tier 2).

    Always produces something.
    """
    if isinstance(symbol, Method):
        return symbol.signature[:120] if symbol.signature else f"Method {symbol.name}"

    if isinstance(symbol, ClassSymbol):
        if symbol.has_parent:
            return f"Class {symbol.name} ({len(symbol.properties)} properties, {len(symbol.methods)} methods, has parent)"
        return f"Class {symbol.name} ({len(symbol.properties)} properties, {len(symbol.methods)} methods)"
    if isinstance(symbol, EnumSymbol):
        return f"Enum {symbol.name} ({len(symbol.values)} values)"
    if isinstance(symbol, AliasSymbol):
        return f"Alias {symbol.name} = {' | '.join(symbol.values)}"[:120]
    if isinstance(symbol, FunctionSymbol):
        return symbol.signature[:120] if symbol.signature else f"Function {symbol.name}"
    if symbol.kind == SymbolKind.UNKNOWN:
        return f"Undeclared type {symbol.name}"
    return f"{symbol.kind.value} {symbol.name}"


def summarize(symbol) -> str:
    """Summary for a symbol or method: description first, then signature."""
    description = symbol.description if isinstance(symbol, (FunctionSymbol, Method)) else ""
    summary = extract_summary_from_description(description)
    return summary or signature_fallback(symbol)


def summarize_symbols(symbols: list[Symbol]) -> dict[int, str]:
    """Summaries keyed by id."""
    return {sym.id: summarize(sym) for sym in symbols}
