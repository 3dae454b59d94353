#!/usr/bin/env python3
"""
Todo request adapter - runs one datastore operation per invocation.

This script receives a JSON request via stdin, dispatches it to the configured
file-backed record store, and prints the JSON result to stdout.

Environment Variables:
    TODO_PROJECT_DIR (required): Base directory for the data directory and counter.
    TODO_DATA_DIR (optional): Record directory (relative to project or absolute).
                              Default: data
    TODO_COUNTER_PATH (optional): Counter file (relative to project or absolute).
                                  Default: counter.txt
    DEBUG (optional): If set, enables debug logging to stderr.

Exit Codes:
    0: Success
    1: Error (missing TODO_PROJECT_DIR, invalid request, file I/O failure, etc.)
    2: The requested record does not exist

Input Format (stdin):
    {"action": "create", "text": "buy milk"}
    {"action": "read", "id": "00001"}
    {"action": "list"}
    {"action": "update", "id": "00001", "text": "buy oat milk"}
    {"action": "delete", "id": "00001"}

Output Format (stdout):
    The Record for create/read/update, a list of Records for list,
    and {"deleted": "<id>"} for delete.
"""
from __future__ import annotations

import asyncio
import json
import logging
import os
import sys
import traceback
from pathlib import Path
from typing import Any, TypedDict

from datastore import get_datastore
from datastore.errors import DatastoreError, NotFoundError
from datastore.protocol import RecordStore

# Version check
if sys.version_info < (3, 10):
    print("Error: Python 3.10+ required", file=sys.stderr)
    sys.exit(1)

ACTIONS: frozenset[str] = frozenset({"create", "read", "list", "update", "delete"})
EXIT_NOT_FOUND: int = 2


class TodoRequest(TypedDict, total=False):
    """Structure for the request read from stdin."""

    action: str
    id: str
    text: str


def configure_logging() -> None:
    """Send log output to stderr, at debug level when DEBUG is set."""
    level = logging.DEBUG if os.environ.get("DEBUG") else logging.WARNING
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )


def validate_request(request: Any) -> TodoRequest:
    """Check that request names a known action and carries its fields.

    Raises:
        ValueError: If the request is malformed.
    """
    if not isinstance(request, dict):
        raise ValueError("Request must be a JSON object")

    action = request.get("action")
    if action not in ACTIONS:
        raise ValueError(f"Unknown action: {action!r}")

    if action in ("read", "update", "delete") and not isinstance(request.get("id"), str):
        raise ValueError(f"Action {action!r} requires a string 'id'")
    if action in ("create", "update") and not isinstance(request.get("text"), str):
        raise ValueError(f"Action {action!r} requires a string 'text'")

    return request


def read_request() -> TodoRequest:
    """Read and validate a request from stdin."""
    return validate_request(json.load(sys.stdin))


async def dispatch(store: RecordStore, request: TodoRequest) -> Any:
    """Run the store operation named by request and return its JSON-ready result."""
    action = request["action"]

    if action == "create":
        return await store.create(request["text"])
    if action == "read":
        return await store.read_one(request["id"])
    if action == "list":
        return await store.read_all()
    if action == "update":
        return await store.update(request["id"], request["text"])

    await store.delete(request["id"])
    return {"deleted": request["id"]}


def main() -> None:
    """Main entry point for the todo request adapter."""
    configure_logging()
    try:
        request = read_request()

        project_dir_str = os.environ.get("TODO_PROJECT_DIR")
        if not project_dir_str:
            print("Warning: TODO_PROJECT_DIR not set", file=sys.stderr)
            sys.exit(1)

        # Reads TODO_DATA_DIR / TODO_COUNTER_PATH and creates the data directory
        store = get_datastore(Path(project_dir_str))

        result = asyncio.run(dispatch(store, request))
        print(json.dumps(result, ensure_ascii=False))

        sys.exit(0)

    except NotFoundError as e:
        print(f"Not found: {e}", file=sys.stderr)
        sys.exit(EXIT_NOT_FOUND)
    except (json.JSONDecodeError, DatastoreError, OSError, ValueError) as e:
        print(f"Error handling request: {e!r}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        # Unexpected errors - preserve stack trace for debugging
        print(f"Unexpected error handling request: {e!r}", file=sys.stderr)
        traceback.print_exc(file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
