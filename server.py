#!/usr/bin/env python3
"""
server.py

MCP (Model Context Protocol) entry point for the todo list. It exposes the
same four operations as the HTTP API as tools, so an assistant such as
Claude Desktop can manage the list over stdio.

HOW THE SERVER WORKS:
1. It opens the database and builds a TodoService around it
2. It registers the tool list and a single call handler on an MCP server
3. It runs over the stdio transport until the client disconnects
"""
import asyncio
from typing import Any

import structlog
from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from todolist.config import Config
from todolist.errors import TodoError
from todolist.logging_config import configure_logging
from todolist.repositories.todo_repository import TodoRepository
from todolist.services.database_service import DatabaseService
from todolist.services.todo_service import TodoService
from todolist.utils.formatters import (
    create_error_response,
    format_todo,
    format_todo_list,
)

logger = structlog.get_logger(__name__)

TOOLS = [
    Tool(
        name="create-todo",
        description="Create a todo at the top of the list. Its order becomes the current highest order + 1.",
        inputSchema={
            "type": "object",
            "properties": {
                "value": {"type": "string", "minLength": 1, "maxLength": 50, "description": "Task description"}
            },
            "required": ["value"]
        }
    ),
    Tool(
        name="list-todos",
        description="List all todos, highest order first",
        inputSchema={"type": "object", "properties": {}}
    ),
    Tool(
        name="update-todo",
        description="Update a todo. Moving it to an order held by another todo swaps the two. done=true marks it done, done=false clears it.",
        inputSchema={
            "type": "object",
            "properties": {
                "id": {"type": "string", "description": "Todo ID (UUID format)"},
                "order": {"type": "integer", "description": "New order (optional)"},
                "value": {"type": "string", "description": "New task description (optional)"},
                "done": {"type": "boolean", "description": "Completion state (optional)"}
            },
            "required": ["id"]
        }
    ),
    Tool(
        name="delete-todo",
        description="Delete a todo",
        inputSchema={
            "type": "object",
            "properties": {
                "id": {"type": "string", "description": "Todo ID (UUID format)"}
            },
            "required": ["id"]
        }
    ),
]


def _text(text: str) -> list[TextContent]:
    return [TextContent(type="text", text=text)]


def _error_text(message: str) -> list[TextContent]:
    return _text(create_error_response(message)["content"][0]["text"])


def dispatch_tool(todo_service: TodoService, tool_name: str, arguments: dict[str, Any]) -> list[TextContent]:
    """
    Run one tool call against the service

    Domain errors come back as error text so a bad call never takes the
    server down.
    """
    arguments = arguments or {}
    try:
        if tool_name == "create-todo":
            todo = todo_service.create_todo(arguments.get("value"))
            return _text(f"✅ Todo Created:\n\n{format_todo(todo)}")

        if tool_name == "list-todos":
            return _text(format_todo_list(todo_service.list_todos()))

        if tool_name == "update-todo":
            changes = {key: val for key, val in arguments.items() if key != "id"}
            todo = todo_service.update_todo(arguments.get("id", ""), changes)
            return _text(f"✅ Todo Updated:\n\n{format_todo(todo)}")

        if tool_name == "delete-todo":
            todo = todo_service.delete_todo(arguments.get("id", ""))
            return _text(f"✅ Todo Deleted: \"{todo.value}\"")
    except TodoError as error:
        logger.info("tool_failed", tool=tool_name, error=error.message)
        return _error_text(f"Failed to run {tool_name}: {error.message}")

    return _error_text(f"Unknown tool: {tool_name}")


def build_server(todo_service: TodoService) -> Server:
    """Create the MCP server with its tool handlers bound to `todo_service`"""
    server = Server("Todo-MCP-Server", version="1.0.0")

    @server.list_tools()
    async def list_tools_handler() -> list[Tool]:
        return TOOLS

    @server.call_tool()
    async def handle_tool_call(tool_name: str, arguments: dict[str, Any]) -> list[TextContent]:
        return dispatch_tool(todo_service, tool_name, arguments)

    return server


async def main():
    """
    Start the server on the stdio transport

    Logs go to stderr because stdout carries the protocol.
    """
    config = Config()
    configure_logging(level=config.logging.level, log_json=config.logging.json)

    database = DatabaseService(config.db)
    server = build_server(TodoService(TodoRepository(database)))
    logger.info("mcp_server_starting", path=database.path)

    try:
        async with stdio_server() as (read_stream, write_stream):
            await server.run(
                read_stream,
                write_stream,
                server.create_initialization_options()
            )
    except KeyboardInterrupt:
        logger.info("mcp_server_shutdown")
    finally:
        # Always close the database on exit
        database.close()


if __name__ == "__main__":
    asyncio.run(main())
