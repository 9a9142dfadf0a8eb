"""Marketplace error taxonomy.

Every failure the ordering and sourcing cores surface to a caller is one of
these kinds. Each carries a stable machine-checkable ``kind`` and the HTTP
status the API layer renders it with. Messages are written for end users and
never include internal identifiers, secrets, or expected signature values.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse


class MarketplaceError(Exception):
    """Base class for all domain-level failures."""

    kind = "marketplace_error"
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.kind, "message": self.message}


class InvalidRequest(MarketplaceError):
    """Missing or malformed input. No state was changed."""

    kind = "invalid_request"
    status_code = 400


class NotFound(MarketplaceError):
    """A referenced cart line, product, order, enquiry or supplier is absent."""

    kind = "not_found"
    status_code = 404


class Unavailable(MarketplaceError):
    """The product exists but is inactive."""

    kind = "unavailable"
    status_code = 409


class MOQExceeded(MarketplaceError):
    """Requested quantity falls outside the product's order-quantity bound."""

    kind = "moq_exceeded"
    status_code = 422


class Unauthorized(MarketplaceError):
    """The acting user neither owns the resource nor is an admin."""

    kind = "unauthorized"
    status_code = 403


class VerificationFailed(MarketplaceError):
    """Payment signature mismatch. The order has been cancelled."""

    kind = "verification_failed"
    status_code = 402


class UpstreamFailure(MarketplaceError):
    """The payment processor or catalogue store call failed."""

    kind = "upstream_failure"
    status_code = 502


def register_error_handlers(app: FastAPI) -> None:
    """Render every MarketplaceError as ``{"error": kind, "message": text}``."""

    @app.exception_handler(MarketplaceError)
    async def _marketplace_error_handler(request: Request, exc: MarketplaceError):  # noqa: ARG001
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())
