"""Middleware package."""
from cfo_helper.middleware.rate_limit import limiter, rate_limit_exceeded_handler, setup_rate_limiting

__all__ = ["limiter", "rate_limit_exceeded_handler", "setup_rate_limiting"]
