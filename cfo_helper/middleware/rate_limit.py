"""Per-IP HTTP rate limiting using slowapi.

This is the coarse limit in front of every route. The advisor's own
per-session gate lives in cfo_helper.advisor.rate_gate; both report 429
with the same `{"detail": ...}` body the routes use for HTTPException.
"""
import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from cfo_helper.config import settings

logger = logging.getLogger(__name__)


limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.RATE_LIMIT_DEFAULT],
    storage_uri=None,  # in-memory, matching the single-process session registry
)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Report a tripped HTTP limit in the app's error shape."""
    logger.warning(f"HTTP rate limit hit by {get_remote_address(request)} on {request.url.path}")
    return JSONResponse(
        status_code=429,
        content={"detail": f"Too many requests ({exc.detail}). Please slow down."},
    )


def setup_rate_limiting(app):
    """Attach the limiter, its 429 handler and the middleware to the app."""
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)
