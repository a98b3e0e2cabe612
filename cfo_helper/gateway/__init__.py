"""Persistence gateway.

Thin CRUD wrappers over the hosted store, scoped by user id. Every call
returns a GatewayResult instead of raising, so callers decide whether a
failure should reach the user or just be logged.
"""
from cfo_helper.gateway.result import GatewayResult

__all__ = ["GatewayResult"]
