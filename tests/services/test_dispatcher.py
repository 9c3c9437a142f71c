"""Tests for intent dispatch and the single-use handler reply."""

from __future__ import annotations

import asyncio
import threading
from typing import Any

import pytest

from action_engine.core.exceptions import ReplyAlreadyResolvedError
from action_engine.core.models import QueryValue
from action_engine.services.dispatcher import Dispatcher, IntentReply
from action_engine.services.intent_registry import IntentRegistry

# pylint: disable=missing-function-docstring,unused-argument

ACTION = {"description": "test", "queries": ["test"]}
HEADERS = {"Google-Assistant-API-Version": "v1"}


def _dispatcher(**handlers: Any) -> Dispatcher:
    registry = IntentRegistry()
    for name, handler in handlers.items():
        registry.add_intent(name, ACTION, handler)
    return Dispatcher(registry.freeze(), assistant_name="test assistant")


def _text_request(intent: str = "assistant.intent.action.TEXT", **extra: Any) -> dict[str, Any]:
    return {"inputs": [{"intent": intent, "arguments": []}], **extra}


def test_missing_default_intent_yields_error_response() -> None:
    dispatcher = _dispatcher()

    result = asyncio.run(dispatcher.run_intent({"inputs": []}))

    assert result.headers == HEADERS
    assert result.body == {
        "conversation_token": "{}",
        "expect_user_response": False,
        "final_response": {
            "speech_response": {
                "text_to_speech": (
                    "There was an error with your request, "
                    "Intent not found: assistant.intent.action.MAIN"
                )
            }
        },
    }


def test_invalid_prefix_never_invokes_handler() -> None:
    calls: list[str] = []

    def handler(user, device, conversation, query, reply):  # type: ignore[no-untyped-def]
        calls.append("called")
        reply.send("unexpected")

    dispatcher = _dispatcher(text=handler)

    result = asyncio.run(dispatcher.run_intent(_text_request("com.other.TEXT")))

    assert calls == []
    speech = result.body["final_response"]["speech_response"]["text_to_speech"]
    assert speech.startswith('There was an error with your request, Invalid intent "com.other.TEXT"')


def test_callback_style_final_response() -> None:
    def handler(user, device, conversation, query, callback):  # type: ignore[no-untyped-def]
        callback(None, "Hi Steven!", None, None, None)

    result = asyncio.run(_dispatcher(text=handler).run_intent(_text_request()))

    assert result.headers == HEADERS
    assert result.body == {
        "conversation_token": "{}",
        "expect_user_response": False,
        "final_response": {"speech_response": {"text_to_speech": "Hi Steven!"}},
    }


def test_continue_response_expands_short_intent_names() -> None:
    def handler(user, device, conversation, query, callback):  # type: ignore[no-untyped-def]
        callback(None, "Want coffee?", ["Still there?"], ["main"], {"step": 1})

    result = asyncio.run(_dispatcher(text=handler).run_intent(_text_request()))

    assert result.body["conversation_token"] == '{"step":1}'
    assert result.body["expect_user_response"] is True
    expected_inputs = result.body["expected_inputs"]
    assert len(expected_inputs) == 1
    assert expected_inputs[0]["input_prompt"]["no_input_prompts"] == [
        {"text_to_speech": "Still there?"}
    ]
    assert expected_inputs[0]["possible_intents"] == [{"intent": "assistant.intent.action.MAIN"}]


def test_continue_without_intents_is_error() -> None:
    def handler(user, device, conversation, query, callback):  # type: ignore[no-untyped-def]
        callback(None, "Want coffee?", ["Still there?"], [], None)

    result = asyncio.run(_dispatcher(text=handler).run_intent(_text_request()))

    assert result.body["expect_user_response"] is False
    assert result.body["final_response"]["speech_response"]["text_to_speech"] == (
        "There was an error with your request, No possible intents given for continued response"
    )


def test_non_string_possible_intent_is_error() -> None:
    def handler(user, device, conversation, query, callback):  # type: ignore[no-untyped-def]
        callback(None, "Want coffee?", ["Still there?"], [5], None)

    result = asyncio.run(_dispatcher(text=handler).run_intent(_text_request()))

    assert result.body["expect_user_response"] is False
    assert result.body["final_response"]["speech_response"]["text_to_speech"] == (
        "There was an error with your request, Invalid possible intent name 5"
    )


def test_circular_state_is_error_with_empty_token() -> None:
    state: dict[str, Any] = {}
    state["self"] = state

    def handler(user, device, conversation, query, reply):  # type: ignore[no-untyped-def]
        reply(None, "hi", None, None, state)

    result = asyncio.run(_dispatcher(text=handler).run_intent(_text_request()))

    assert result.body["conversation_token"] == "{}"
    assert result.body["expect_user_response"] is False
    assert result.body["final_response"]["speech_response"]["text_to_speech"].startswith(
        "There was an error with your request, Circular reference"
    )


def test_handler_error_becomes_error_response_with_state() -> None:
    def handler(user, device, conversation, query, reply):  # type: ignore[no-untyped-def]
        reply.fail(RuntimeError("upstream unavailable"), state={"retry": True})

    result = asyncio.run(_dispatcher(text=handler).run_intent(_text_request()))

    assert result.body["conversation_token"] == '{"retry":true}'
    assert result.body["final_response"]["speech_response"]["text_to_speech"] == (
        "There was an error with your request, upstream unavailable"
    )


def test_handler_receives_normalized_arguments() -> None:
    seen: dict[str, Any] = {}

    def handler(user, device, conversation, query, reply):  # type: ignore[no-untyped-def]
        seen.update(user=user, device=device, conversation=conversation, query=query)
        reply.send(f"Hi {query['name'].value}!")

    body = {
        "user": {"user_id": "u1"},
        "conversation": {"conversation_id": "c1", "conversation_type": 1},
        "inputs": [
            {
                "intent": "assistant.intent.action.TEXT",
                "arguments": [{"name": "name", "raw_text": "O ' Brien"}],
            },
            {"intent": "assistant.intent.action.IGNORED"},
        ],
    }

    result = asyncio.run(_dispatcher(text=handler).run_intent(body))

    assert seen["user"] == {"user_id": "u1"}
    assert seen["device"] == {}
    assert seen["conversation"]["type"] == "NEW"
    assert seen["query"]["name"] == QueryValue(value="O'Brien", raw_text="O'Brien")
    assert "trigger_query" in seen["query"]
    assert result.body["final_response"]["speech_response"]["text_to_speech"] == "Hi O'Brien!"


def test_async_handler_is_awaited() -> None:
    async def handler(user, device, conversation, query, reply):  # type: ignore[no-untyped-def]
        await asyncio.sleep(0)
        reply.send("async hello")

    result = asyncio.run(_dispatcher(text=handler).run_intent(_text_request()))

    assert result.body["final_response"]["speech_response"]["text_to_speech"] == "async hello"


def test_handler_may_resolve_from_worker_thread() -> None:
    def handler(user, device, conversation, query, reply):  # type: ignore[no-untyped-def]
        threading.Thread(target=reply.send, args=("from thread",)).start()

    result = asyncio.run(_dispatcher(text=handler).run_intent(_text_request()))

    assert result.body["final_response"]["speech_response"]["text_to_speech"] == "from thread"


def test_raising_handler_becomes_error_response() -> None:
    def handler(user, device, conversation, query, reply):  # type: ignore[no-untyped-def]
        raise KeyError("missing")

    result = asyncio.run(_dispatcher(text=handler).run_intent(_text_request()))

    assert result.body["expect_user_response"] is False
    assert result.body["final_response"]["speech_response"]["text_to_speech"] == (
        "There was an error with your request, 'missing'"
    )


def test_double_resolution_keeps_first_outcome() -> None:
    errors: list[Exception] = []

    def handler(user, device, conversation, query, reply):  # type: ignore[no-untyped-def]
        reply.send("first")
        try:
            reply.send("second")
        except ReplyAlreadyResolvedError as exc:
            errors.append(exc)
            raise

    result = asyncio.run(_dispatcher(text=handler).run_intent(_text_request()))

    assert len(errors) == 1
    assert result.body["final_response"]["speech_response"]["text_to_speech"] == "first"


def test_reply_rejects_second_resolution() -> None:
    async def scenario() -> None:
        reply = IntentReply()
        reply(None, "once")
        assert reply.resolved
        with pytest.raises(ReplyAlreadyResolvedError):
            reply.fail(ValueError("twice"))
        outcome = await reply.wait()
        assert outcome.message == "once"
        assert outcome.error is None

    asyncio.run(scenario())


def test_test_intent_builds_mock_request() -> None:
    seen: dict[str, Any] = {}

    def handler(user, device, conversation, query, reply):  # type: ignore[no-untyped-def]
        seen["user"] = user
        seen["query"] = query
        reply.send(f"Hello {query['name'].value}")

    result = asyncio.run(_dispatcher(main=handler).test_intent("Main", {"name": "Steven"}))

    assert seen["user"] == {"user_id": "XXXXXXXXXXXXXXXX"}
    assert seen["query"]["trigger_query"].value == '[TEST REQUEST ({"name":"Steven"})]'
    assert result.body["final_response"]["speech_response"]["text_to_speech"] == "Hello Steven"
