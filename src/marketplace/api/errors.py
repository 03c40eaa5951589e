"""HTTP mapping for the errors Protean's FastAPI integration does not know."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from marketplace.errors import AuthorizationError, BatchCommitError


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(AuthorizationError)
    async def authorization_error_handler(request: Request, exc: AuthorizationError):
        # The reason was logged where access was denied
        return JSONResponse(status_code=403, content={"detail": "Not permitted"})

    @app.exception_handler(BatchCommitError)
    async def batch_commit_error_handler(request: Request, exc: BatchCommitError):
        return JSONResponse(status_code=503, content={"detail": str(exc)})
