"""Public interface for the graph gateway adapter."""

from __future__ import annotations

from .client import LOGIN_MUTATION, GraphGateway
from .schema import GraphError, GraphResponse, LoginData

__all__ = [
    "LOGIN_MUTATION",
    "GraphError",
    "GraphGateway",
    "GraphResponse",
    "LoginData",
]
