"""Per-request log context for the marketplace API."""

from fastapi import FastAPI, Request

from marketplace.utils.logging import add_context, clear_context


def _actor_id(request: Request) -> str | None:
    authorization = request.headers.get("authorization")
    if not authorization:
        return None
    return authorization.removeprefix("Bearer ").strip() or None


def register_request_context(app: FastAPI) -> None:
    """Bind method, path and actor id to every log event a request emits."""

    @app.middleware("http")
    async def request_context_middleware(request: Request, call_next):
        clear_context()
        add_context(method=request.method, path=request.url.path, actor_id=_actor_id(request))
        try:
            return await call_next(request)
        finally:
            clear_context()
