"""Formatting of handler outcomes into Conversation API response bodies.

See https://developers.google.com/actions/reference/conversation for the
wire format. ``expect_user_response`` is derived rather than passed in: a
response with no-input prompts continues the conversation, anything else is
final, and errors always end it.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any, Optional

from action_engine.core.exceptions import MissingPossibleIntentsError
from action_engine.core.logging import get_logger
from action_engine.core.models import PlainText, Ssml

logger = get_logger(__name__)

API_VERSION_HEADERS = {"Google-Assistant-API-Version": "v1"}

ERROR_TEMPLATE = "There was an error with your request, {message}"
NO_RESPONSE_TEXT = "No response provided"
INVALID_SPEECH_TEXT = 'Invalid Speech Response: Must be String or Object containing "ssml" field.'
NO_POSSIBLE_INTENTS_MESSAGE = "No possible intents given for continued response"


class ResponseState(str, Enum):
    """The three mutually exclusive response states."""

    ERROR = "error"
    FINAL = "final"
    CONTINUE = "continue"


def _as_list(value: Any) -> Optional[list[Any]]:
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        return list(value)
    return None


def _error_message(error: Any) -> str:
    if isinstance(error, BaseException):
        return str(error) or type(error).__name__
    return str(error)


class ActionResponse:
    """A handler outcome bound to one of the three response states."""

    def __init__(
        self,
        error: Any = None,
        message: Any = None,
        prompts: Optional[Sequence[Any]] = None,
        intents: Optional[Sequence[str]] = None,
    ) -> None:
        self.error = error
        self.message = message
        self.prompts = _as_list(prompts)
        self.intents = _as_list(intents) or []
        self.expect_user_response = False if error else bool(self.prompts)

        if self.expect_user_response and not self.intents:
            self.error = MissingPossibleIntentsError(NO_POSSIBLE_INTENTS_MESSAGE)
            self.expect_user_response = False

    @property
    def state(self) -> ResponseState:
        if self.error:
            return ResponseState.ERROR
        if self.expect_user_response:
            return ResponseState.CONTINUE
        return ResponseState.FINAL

    def format_speech_response_error(self, error: Any) -> dict[str, str]:
        return self.format_speech_response(ERROR_TEMPLATE.format(message=_error_message(error)))

    def format_speech_response(self, message: Any) -> dict[str, str]:
        """Return a speech response for plain text or SSML."""
        if isinstance(message, PlainText):
            return {"text_to_speech": message.text or NO_RESPONSE_TEXT}
        if isinstance(message, Ssml):
            if not message.ssml:
                return {"text_to_speech": INVALID_SPEECH_TEXT}
            return {"ssml": message.ssml}
        if isinstance(message, Mapping):
            ssml = message.get("ssml")
            if not ssml:
                return {"text_to_speech": INVALID_SPEECH_TEXT}
            return {"ssml": ssml}
        if isinstance(message, str) or not message:
            return {"text_to_speech": message or NO_RESPONSE_TEXT}
        return {"text_to_speech": INVALID_SPEECH_TEXT}

    def format_expected_intent(self, intent_name: str) -> dict[str, str]:
        return {"intent": intent_name}

    def to_object(self, conversation_token: Any = None) -> dict[str, Any]:
        """Serialize to the protocol body, embedding ``conversation_token`` as JSON text."""
        token = dict(conversation_token) if isinstance(conversation_token, Mapping) else {}
        try:
            serialized_token = json.dumps(
                token, separators=(",", ":"), ensure_ascii=False, default=str
            )
        except (TypeError, ValueError) as exc:
            logger.error("Could not serialize conversation token: %s", exc)
            serialized_token = "{}"
            self.error = self.error or exc
            self.expect_user_response = False

        if self.state is ResponseState.ERROR:
            return {
                "conversation_token": serialized_token,
                "expect_user_response": False,
                "final_response": {
                    "speech_response": self.format_speech_response_error(self.error)
                },
            }

        if self.state is ResponseState.FINAL:
            return {
                "conversation_token": serialized_token,
                "expect_user_response": False,
                "final_response": {"speech_response": self.format_speech_response(self.message)},
            }

        return {
            "conversation_token": serialized_token,
            "expect_user_response": True,
            "expected_inputs": [
                {
                    "input_prompt": {
                        "initial_prompts": [self.format_speech_response(self.message)],
                        "no_input_prompts": [
                            self.format_speech_response(prompt) for prompt in self.prompts or []
                        ],
                    },
                    "possible_intents": [
                        self.format_expected_intent(intent) for intent in self.intents
                    ],
                }
            ],
        }


__all__ = [
    "API_VERSION_HEADERS",
    "ActionResponse",
    "ERROR_TEMPLATE",
    "INVALID_SPEECH_TEXT",
    "NO_POSSIBLE_INTENTS_MESSAGE",
    "NO_RESPONSE_TEXT",
    "ResponseState",
]
