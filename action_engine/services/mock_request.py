"""Mock Conversation API request bodies for exercising intents locally."""

from __future__ import annotations

import json
from typing import Any, Mapping, Optional

MOCK_USER_ID = "XXXXXXXXXXXXXXXX"
MOCK_CONVERSATION_ID = "1000000000000"
# Keyboard input, per the Conversation API raw input types.
MOCK_INPUT_TYPE = 2


def build_mock_request(
    assistant_name: str,
    intent_name: str,
    query: Optional[Mapping[str, Any]] = None,
) -> dict[str, Any]:
    """Return a request body that triggers ``intent_name`` with ``query`` as arguments."""
    query = dict(query or {})
    message = f"[TEST REQUEST ({json.dumps(query, separators=(',', ':'))})]"
    arguments = [{"name": "trigger_query", "raw_text": message, "text_value": message}]
    arguments.extend(
        {"name": key, "raw_text": str(value), "text_value": str(value)}
        for key, value in query.items()
    )

    return {
        "inputs": [
            {
                "intent": intent_name,
                "raw_inputs": [
                    {
                        "input_type": MOCK_INPUT_TYPE,
                        "query": f"tell {assistant_name} {message}",
                        "annotation_sets": [],
                    }
                ],
                "arguments": arguments,
            }
        ],
        "user": {"user_id": MOCK_USER_ID},
        "conversation": {"conversation_id": MOCK_CONVERSATION_ID, "type": 1},
    }


__all__ = ["MOCK_CONVERSATION_ID", "MOCK_USER_ID", "build_mock_request"]
