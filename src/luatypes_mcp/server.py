"""MCP server for luatypes-mcp."""

import asyncio
import json
import logging
import os
import sys

from mcp.server import Server
from mcp.types import Tool, TextContent

from .tools.build_database import build_database
from .tools.list_databases import list_databases
from .tools.search_symbols import search_symbols
from .tools.get_symbol import get_symbol, get_symbols
from .tools.get_file_outline import get_file_outline
from .tools.get_class_tree import get_class_tree
from .tools.list_unresolved import list_unresolved
from .tools.get_references import get_references


logger = logging.getLogger(__name__)

DATABASE_PROPERTY = {
    "type": "string",
    "description": "Database name given to build_database",
    "default": "default"
}

# Create server
server = Server("luatypes-mcp")


def default_sources() -> list[str]:
    """Declaration files named by LUATYPES_SOURCES (os.pathsep separated)."""
    raw = os.environ.get("LUATYPES_SOURCES", "")
    return [p for p in raw.split(os.pathsep) if p.strip()]


@server.list_tools()
async def list_tools() -> list[Tool]:
    """List all available tools."""
    return [
        Tool(
            name="build_database",
            description="Parse Lua annotation declaration files (---@class, ---@enum, ---@alias, function stubs) into a cross-referenced symbol database held in memory.",
            inputSchema={
                "type": "object",
                "properties": {
                    "paths": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "Declaration file paths in processing order. Defaults to LUATYPES_SOURCES."
                    },
                    "name": DATABASE_PROPERTY
                }
            }
        ),
        Tool(
            name="list_databases",
            description="List all built databases with their source files and statistics.",
            inputSchema={
                "type": "object",
                "properties": {}
            }
        ),
        Tool(
            name="search_symbols",
            description="Search classes, enums, aliases and global functions by name. Optionally include properties, methods and parameters.",
            inputSchema={
                "type": "object",
                "properties": {
                    "query": {
                        "type": "string",
                        "description": "Case-insensitive substring, or a regular expression when regex is true"
                    },
                    "database": DATABASE_PROPERTY,
                    "kind": {
                        "type": "string",
                        "description": "Optional filter by symbol kind",
                        "enum": ["Class", "Enum", "Alias", "GlobalFunction", "Unknown"]
                    },
                    "regex": {
                        "type": "boolean",
                        "description": "Treat query as a regular expression",
                        "default": False
                    },
                    "include_members": {
                        "type": "boolean",
                        "description": "Also search properties, methods and parameters",
                        "default": False
                    },
                    "max_results": {
                        "type": "integer",
                        "description": "Maximum number of results per category",
                        "default": 20
                    }
                },
                "required": ["query"]
            }
        ),
        Tool(
            name="get_symbol",
            description="Get a symbol's members, parsed type signatures, reference count and declaration source. Use after search_symbols or get_file_outline.",
            inputSchema={
                "type": "object",
                "properties": {
                    "symbol_id": {
                        "type": "integer",
                        "description": "Symbol ID from search_symbols or get_file_outline"
                    },
                    "database": DATABASE_PROPERTY
                },
                "required": ["symbol_id"]
            }
        ),
        Tool(
            name="get_symbols",
            description="Get details of multiple symbols in one call.",
            inputSchema={
                "type": "object",
                "properties": {
                    "symbol_ids": {
                        "type": "array",
                        "items": {"type": "integer"},
                        "description": "List of symbol IDs to retrieve"
                    },
                    "database": DATABASE_PROPERTY
                },
                "required": ["symbol_ids"]
            }
        ),
        Tool(
            name="get_file_outline",
            description="Get all symbols declared in a declaration file, in line order, with properties, methods and enum values.",
            inputSchema={
                "type": "object",
                "properties": {
                    "file": {
                        "type": "string",
                        "description": "File index, path, or path suffix (e.g. 'Actor.lua')"
                    },
                    "database": DATABASE_PROPERTY
                },
                "required": ["file"]
            }
        ),
        Tool(
            name="get_class_tree",
            description="Get the class inheritance tree, optionally rooted at one class.",
            inputSchema={
                "type": "object",
                "properties": {
                    "database": DATABASE_PROPERTY,
                    "root": {
                        "type": "string",
                        "description": "Optional class name to root the tree at"
                    }
                }
            }
        ),
        Tool(
            name="list_unresolved",
            description="List type names that are referenced but never declared, most referenced first.",
            inputSchema={
                "type": "object",
                "properties": {
                    "database": DATABASE_PROPERTY
                }
            }
        ),
        Tool(
            name="get_references",
            description="List the properties, parameters, methods and global functions that reference a symbol.",
            inputSchema={
                "type": "object",
                "properties": {
                    "symbol": {
                        "type": ["integer", "string"],
                        "description": "Symbol ID or exact name"
                    },
                    "database": DATABASE_PROPERTY
                },
                "required": ["symbol"]
            }
        ),
    ]


@server.call_tool()
async def call_tool(name: str, arguments: dict) -> list[TextContent]:
    """Handle tool calls."""
    database = arguments.get("database", "default")

    try:
        if name == "build_database":
            result = build_database(
                paths=arguments.get("paths") or default_sources(),
                name=arguments.get("name", "default")
            )
        elif name == "list_databases":
            result = list_databases()
        elif name == "search_symbols":
            result = search_symbols(
                query=arguments["query"],
                database=database,
                kind=arguments.get("kind"),
                regex=arguments.get("regex", False),
                include_members=arguments.get("include_members", False),
                max_results=arguments.get("max_results", 20)
            )
        elif name == "get_symbol":
            result = get_symbol(
                symbol_id=int(arguments["symbol_id"]),
                database=database
            )
        elif name == "get_symbols":
            result = get_symbols(
                symbol_ids=[int(i) for i in arguments["symbol_ids"]],
                database=database
            )
        elif name == "get_file_outline":
            result = get_file_outline(
                file=arguments["file"],
                database=database
            )
        elif name == "get_class_tree":
            result = get_class_tree(
                database=database,
                root=arguments.get("root")
            )
        elif name == "list_unresolved":
            result = list_unresolved(database=database)
        elif name == "get_references":
            result = get_references(
                symbol=arguments["symbol"],
                database=database
            )
        else:
            result = {"error": f"Unknown tool: {name}"}

        return [TextContent(type="text", text=json.dumps(result, indent=2))]

    except Exception as e:
        logger.exception("Tool %s failed", name)
        return [TextContent(type="text", text=json.dumps({"error": str(e)}, indent=2))]


async def run_server():
    """Run the MCP server."""
    from mcp.server.stdio import stdio_server

    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options()
        )


def main():
    """Main entry point."""
    # stdout carries the MCP stream
    logging.basicConfig(
        stream=sys.stderr,
        level=os.environ.get("LUATYPES_LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    asyncio.run(run_server())


if __name__ == "__main__":
    main()
