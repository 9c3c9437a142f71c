"""Tests for service container bootstrap."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from action_engine.bootstrap import build_default_service_container, build_registry
from action_engine.core.config import Settings
from action_engine.core.exceptions import RegistryFrozenError

# pylint: disable=missing-function-docstring


def test_build_registry_uses_configured_prefix() -> None:
    settings = Settings(INTENT_PREFIX="com.example.action", MAIN_INTENT="welcome", INTENTS_DIR=None)

    registry = build_registry(settings)

    assert registry.default_intent_name() == "com.example.action.WELCOME"
    assert len(registry) == 0


def test_default_container_freezes_registry(tmp_path: Path) -> None:
    intent_dir = tmp_path / "main"
    intent_dir.mkdir()
    (intent_dir / "action.json").write_text('{"description": "d", "queries": []}', encoding="utf-8")
    (intent_dir / "handler.py").write_text(
        "def handler(user, device, conversation, query, reply):\n    reply.send('loaded')\n",
        encoding="utf-8",
    )
    settings = Settings(INTENTS_DIR=tmp_path, ASSISTANT_NAME="bot")

    services = build_default_service_container(settings)

    assert services.registry.frozen
    with pytest.raises(RegistryFrozenError):
        services.registry.add_intent("late", {}, lambda *args: None)
    assert services.dispatcher is not None
    assert services.dispatcher.assistant_name == "bot"
    result = asyncio.run(services.dispatcher.test_intent(None))
    assert result.body["final_response"]["speech_response"]["text_to_speech"] == "loaded"
