"""Action package generation from registered intents.

See https://developers.google.com/actions/reference/action-package. Each
intent's ``queries`` become the ``queryPatterns`` of its initial trigger and
every action is fulfilled by the same HTTP endpoint.
"""

from __future__ import annotations

from typing import Any

from action_engine.core.intents import Intent
from action_engine.services.intent_registry import IntentRegistry

ACTION_PATH = "/api/v1/action"


def default_endpoint(base_url: str) -> str:
    """Return the fulfillment URL served by this engine under ``base_url``."""
    return base_url.rstrip("/") + ACTION_PATH


def build_action(intent: Intent, endpoint: str) -> dict[str, Any]:
    queries = intent.queries
    query_patterns = [{"queryPattern": query} for query in queries] if queries else None
    return {
        "description": intent.description,
        "initialTrigger": {
            "intent": intent.full_name,
            "queryPatterns": query_patterns,
        },
        "httpExecution": {"url": endpoint},
    }


def generate_action_package(
    registry: IntentRegistry,
    project_id: str,
    version_label: str,
    invocation_name: str,
    voice_name: str,
    language_code: str,
    endpoint: str,
) -> dict[str, Any]:
    """Return the action package describing every intent in ``registry``."""
    actions = [build_action(intent, endpoint) for intent in registry.intents().values()]
    return {
        "versionLabel": version_label,
        "agentInfo": {
            "languageCode": language_code,
            "projectId": project_id,
            "invocationNames": [invocation_name],
            "voiceName": voice_name,
        },
        "actions": actions,
    }


__all__ = ["ACTION_PATH", "build_action", "default_endpoint", "generate_action_package"]
