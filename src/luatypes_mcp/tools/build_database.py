"""Build database tool - read declaration files, parse, store."""

import logging
from pathlib import Path
from typing import Optional

from ..parser import build_database as build_symbol_database
from ..storage import DEFAULT_DATABASE, DatabaseStore, diagnostic_to_dict, get_default_store


logger = logging.getLogger(__name__)

MAX_FILE_SIZE = 20 * 1024 * 1024  # 20MB
MAX_DIAGNOSTICS = 50


def read_sources(paths: list[str], max_size: int = MAX_FILE_SIZE) -> tuple[list[str], list[str], list[str]]:
    """Read declaration files in the given order.

    Returns:
        (paths read, file contents, warnings) - unreadable files are skipped
        with a warning so file indexes follow the successfully read files.
    """
    read_paths = []
    contents = []
    warnings = []

    for raw_path in paths:
        file_path = Path(raw_path).expanduser()

        if not file_path.is_file():
            warnings.append(f"File not found: {raw_path}")
            continue

        try:
            if file_path.stat().st_size > max_size:
                warnings.append(f"File too large, skipped: {raw_path}")
                continue
            content = file_path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            warnings.append(f"Failed to read {raw_path}: {e}")
            continue

        read_paths.append(str(file_path))
        contents.append(content)

    return read_paths, contents, warnings


def build_database(
    paths: list[str],
    name: str = DEFAULT_DATABASE,
    store: Optional[DatabaseStore] = None,
) -> dict:
    """Build a symbol database from declaration files and keep it in the store.

    Args:
        paths: Declaration file paths, in processing order
        name: Name to store the database under
        store: Database store (defaults to the process-wide store)

    Returns:
        Dict with build statistics, warnings and the first diagnostics
    """
    if not paths:
        return {"success": False, "error": "No declaration files given"}

    store = store or get_default_store()
    read_paths, contents, warnings = read_sources(paths)

    if not contents:
        return {"success": False, "error": "No declaration files could be read", "warnings": warnings}

    database = build_symbol_database(contents)
    stored = store.save_database(name, read_paths, database)

    result = {
        "success": True,
        "database": name,
        "built_at": stored.built_at,
        "files": read_paths,
        "stats": database.stats(),
        "unresolved": [s.name for s in database.unresolved[:MAX_DIAGNOSTICS]],
        "diagnostics": [diagnostic_to_dict(d) for d in database.diagnostics[:MAX_DIAGNOSTICS]],
    }

    if warnings:
        result["warnings"] = warnings

    if len(database.diagnostics) > MAX_DIAGNOSTICS:
        result["note"] = f"Showing first {MAX_DIAGNOSTICS} of {len(database.diagnostics)} diagnostics"

    return result
