"""Dispatch normalized requests to registered intent handlers.

Handlers are called as ``handler(user, device, conversation, query, reply)``
and may be plain functions or coroutine functions. ``reply`` is an
:class:`IntentReply` that must be resolved exactly once, either by calling it
with ``(err, message, prompts, intents, state)`` or through :meth:`IntentReply.send`
and :meth:`IntentReply.fail`. The dispatcher waits for that resolution with no
timeout.
"""

from __future__ import annotations

import asyncio
import inspect
import threading
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from action_engine.core.exceptions import ReplyAlreadyResolvedError
from action_engine.core.intents import Intent
from action_engine.core.logging import get_logger, intent_name_context
from action_engine.core.models import ActionResult, Input, NormalizedRequest
from action_engine.services.action_response import API_VERSION_HEADERS, ActionResponse
from action_engine.services.intent_registry import IntentRegistry
from action_engine.services.mock_request import build_mock_request
from action_engine.services.request_parser import parse_input, parse_request

logger = get_logger(__name__)


@dataclass(slots=True)
class ReplyOutcome:
    """What a handler resolved its reply with."""

    error: Any = None
    message: Any = None
    prompts: Optional[Sequence[Any]] = None
    intents: Optional[Sequence[str]] = None
    state: Any = None


class IntentReply:
    """Single-use result channel handed to an intent handler.

    Resolution may happen on the event loop thread or on a worker thread; a
    second resolution raises :class:`ReplyAlreadyResolvedError`.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop or asyncio.get_running_loop()
        self._future: asyncio.Future[ReplyOutcome] = self._loop.create_future()
        self._lock = threading.Lock()
        self._resolved = False

    @property
    def resolved(self) -> bool:
        return self._resolved

    def __call__(
        self,
        err: Any = None,
        message: Any = None,
        prompts: Optional[Sequence[Any]] = None,
        intents: Optional[Sequence[str]] = None,
        state: Any = None,
    ) -> None:
        self._resolve(ReplyOutcome(err, message, prompts, intents, state))

    def send(
        self,
        message: Any,
        prompts: Optional[Sequence[Any]] = None,
        intents: Optional[Sequence[str]] = None,
        state: Any = None,
    ) -> None:
        """Resolve with a successful final or continued response."""
        self._resolve(ReplyOutcome(None, message, prompts, intents, state))

    def fail(self, error: Any, state: Any = None) -> None:
        """Resolve with an error response."""
        self._resolve(ReplyOutcome(error=error, state=state))

    def _resolve(self, outcome: ReplyOutcome) -> None:
        with self._lock:
            if self._resolved:
                raise ReplyAlreadyResolvedError("Intent reply has already been resolved")
            self._resolved = True
        self._loop.call_soon_threadsafe(self._set_result, outcome)

    def _set_result(self, outcome: ReplyOutcome) -> None:
        if not self._future.done():
            self._future.set_result(outcome)

    async def wait(self) -> ReplyOutcome:
        return await self._future


class Dispatcher:
    """Route inbound request bodies to the handler registered for their top input."""

    def __init__(self, registry: IntentRegistry, assistant_name: str = "my assistant") -> None:
        self.registry = registry
        self.assistant_name = assistant_name

    def headers(self) -> dict[str, str]:
        return dict(API_VERSION_HEADERS)

    def select_input(self, request: NormalizedRequest) -> Input:
        """Return the first input, or a default input for the main intent."""
        default_name = self.registry.default_intent_name()
        if request.inputs:
            if len(request.inputs) > 1:
                logger.info("Ignoring %d additional inputs", len(request.inputs) - 1)
            return request.inputs[0]
        return parse_input({}, default_name)

    async def run_intent(self, body: Any) -> ActionResult:
        """Dispatch a raw request body and return the protocol response."""
        request = parse_request(body, self.registry.default_intent_name())
        top_input = self.select_input(request)

        with intent_name_context(top_input.intent):
            lookup = self.registry.find_intent(top_input.intent)
            if lookup.intent is None:
                logger.warning("Intent lookup failed: %s", lookup.error)
                return ActionResult(ActionResponse(lookup.error).to_object(), self.headers())

            outcome = await self._invoke(lookup.intent, request, top_input)
            error = outcome.error
            short_names = outcome.intents if isinstance(outcome.intents, (list, tuple)) else []
            invalid = [name for name in short_names if not isinstance(name, str)]
            if invalid:
                logger.warning("Handler returned invalid possible intents: %r", invalid)
                error = error or TypeError(f"Invalid possible intent name {invalid[0]!r}")
                short_names = []
            intents = [self.registry.format_intent_name(name) for name in short_names]
            response = ActionResponse(error, outcome.message, outcome.prompts, intents)
            logger.info("Intent handled with %s response", response.state.value)
            return ActionResult(response.to_object(outcome.state), self.headers())

    async def test_intent(
        self, short_name: Optional[str], query: Optional[Mapping[str, Any]] = None
    ) -> ActionResult:
        """Run an intent against a mock request built from ``query``."""
        body = build_mock_request(
            self.assistant_name, self.registry.format_intent_name(short_name), query
        )
        return await self.run_intent(body)

    async def _invoke(
        self, intent: Intent, request: NormalizedRequest, top_input: Input
    ) -> ReplyOutcome:
        reply = IntentReply()
        try:
            result = intent.handler(
                request.user,
                request.device,
                request.conversation,
                top_input.query,
                reply,
            )
            if inspect.isawaitable(result):
                await result
        except Exception as exc:  # pylint: disable=broad-except
            logger.exception("Handler for %s raised", intent.full_name)
            if reply.resolved:
                return await reply.wait()
            return ReplyOutcome(error=exc)
        return await reply.wait()


__all__ = ["Dispatcher", "IntentReply", "ReplyOutcome"]
