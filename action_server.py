"""Top-level ASGI entrypoint (``uvicorn action_server:app``)."""

from action_engine.api_factory import create_app

app = create_app()


__all__ = ["app", "create_app"]
