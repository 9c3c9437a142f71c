"""Load intent definitions from a directory tree into an :class:`IntentRegistry`.

Each immediate subdirectory is one intent, named after the directory
(``intents/main`` registers ``assistant.intent.action.MAIN``), and must hold:

- ``action.json``: an object with a ``description`` string and a ``queries``
  list of query patterns;
- ``handler.py``: a module exporting a callable ``handler`` with the signature
  ``(user, device, conversation, query, reply)``.

Any missing or malformed file raises :class:`IntentLoadError`. Loading happens
at setup time, so these errors are fatal.
"""

from __future__ import annotations

import importlib.util
import json
from pathlib import Path
from typing import Union

from pydantic import ValidationError

from action_engine.core.exceptions import IntentLoadError
from action_engine.core.intents import IntentHandler, IntentMetadata
from action_engine.core.logging import get_logger
from action_engine.services.intent_registry import IntentRegistry

logger = get_logger(__name__)

ACTION_FILE = "action.json"
HANDLER_FILE = "handler.py"
HANDLER_ATTRIBUTE = "handler"


def load_metadata(name: str, action_path: Path) -> IntentMetadata:
    """Read and validate ``action.json`` for intent ``name``."""
    try:
        raw = json.loads(action_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("Invalid %s for intent %s: %s", ACTION_FILE, name, exc)
        raise IntentLoadError(
            f'Could not load intent {name}: Invalid JSON exported from "{ACTION_FILE}"'
        ) from exc
    try:
        return IntentMetadata.model_validate(raw)
    except ValidationError as exc:
        logger.error("Invalid %s for intent %s: %s", ACTION_FILE, name, exc)
        raise IntentLoadError(
            f'Could not load intent {name}: "{ACTION_FILE}" must contain '
            f'a "description" and a "queries" list'
        ) from exc


def load_handler(name: str, handler_path: Path) -> IntentHandler:
    """Import ``handler.py`` for intent ``name`` and return its ``handler`` callable."""
    module_name = f"action_engine_intents.{name}"
    spec = importlib.util.spec_from_file_location(module_name, handler_path)
    if spec is None or spec.loader is None:
        raise IntentLoadError(f'Could not load intent {name}: Cannot import "{HANDLER_FILE}"')
    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as exc:  # pylint: disable=broad-except
        logger.error("Failed importing %s for intent %s: %s", HANDLER_FILE, name, exc)
        raise IntentLoadError(
            f'Could not load intent {name}: Invalid function exported from "{HANDLER_FILE}"'
        ) from exc
    handler = getattr(module, HANDLER_ATTRIBUTE, None)
    if not callable(handler):
        raise IntentLoadError(
            f'Could not load intent {name}: Invalid function exported from "{HANDLER_FILE}"'
        )
    return handler


def load_intents(registry: IntentRegistry, pathname: Union[str, Path]) -> IntentRegistry:
    """Register every intent found under ``pathname``; relative paths resolve from the cwd."""
    root = Path(pathname)
    if not root.is_absolute():
        root = Path.cwd() / root
    if not root.is_dir():
        raise IntentLoadError(f"Can not load intents: {root} is not a directory")

    # Skip __pycache__ and hidden directories.
    candidates = (p for p in root.iterdir() if p.is_dir() and not p.name.startswith(("_", ".")))
    for intent_dir in sorted(candidates):
        name = intent_dir.name
        action_path = intent_dir / ACTION_FILE
        handler_path = intent_dir / HANDLER_FILE
        if not action_path.exists():
            raise IntentLoadError(f'Can not load intent {name}: No "{ACTION_FILE}" found.')
        if not handler_path.exists():
            raise IntentLoadError(f'Can not load intent {name}: No "{HANDLER_FILE}" found.')

        metadata = load_metadata(name, action_path)
        handler = load_handler(name, handler_path)
        registry.add_intent(name, metadata, handler)
        logger.info("Loaded intent %s", registry.format_intent_name(name))

    return registry


__all__ = ["ACTION_FILE", "HANDLER_FILE", "load_handler", "load_intents", "load_metadata"]
