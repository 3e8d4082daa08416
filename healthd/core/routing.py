"""Request Dispatch — maps (method, request target) to a plain-text reply.

Invariants:
    - Exactly one route: GET /health
    - Path match is exact and case-sensitive; the query component is ignored
    - Every request yields exactly one reply (hit → handler, miss → 404)

Design Decisions:
    - resolve() raises RouteNotFoundError instead of returning None, so the
      FastAPI handlers and the stdlib listener render misses through one path
    - check_health() is a stub liveness check (no dependency probes defined)
"""

from typing import Callable
from urllib.parse import urlsplit

from healthd.core.errors import RouteNotFoundError
from healthd.core.reply import PlainTextReply, HEALTHY

HEALTH_METHOD = "GET"
HEALTH_PATH = "/health"

RouteHandler = Callable[[], PlainTextReply]


def check_health() -> PlainTextReply:
    """Liveness check. Reports healthy whenever the process can answer."""
    return HEALTHY


def request_path(target: str) -> str:
    """Path component of a request target, query and fragment dropped."""
    return urlsplit(target).path


def resolve(method: str, target: str) -> RouteHandler:
    """Find the handler for a request or raise RouteNotFoundError."""
    path = request_path(target)
    if method == HEALTH_METHOD and path == HEALTH_PATH:
        return check_health
    raise RouteNotFoundError(method, path)


def dispatch(method: str, target: str) -> PlainTextReply:
    try:
        handler = resolve(method, target)
    except RouteNotFoundError as exc:
        return exc.to_reply()
    return handler()
