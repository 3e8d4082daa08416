"""Health Probe — the single liveness endpoint.

Invariants:
    - GET /health always returns 200 "OK\n" if the process is up
    - Registered for GET only: other methods fall through to the 404 handler
    - Matched against the raw (undecoded) target: /%68ealth is a miss

Design Decisions:
    - Delegates to core.routing.resolve so both listeners share one match rule;
      Starlette routes on the percent-decoded path, resolve() re-checks the raw one
"""

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

from healthd.api.responses import to_plain_response
from healthd.core.routing import HEALTH_PATH, resolve

router = APIRouter(tags=["health"])


def raw_target(request: Request) -> str:
    """Request target as sent on the wire; falls back to the decoded path."""
    raw_path = request.scope.get("raw_path")
    if not raw_path:
        return request.url.path
    return raw_path.decode("latin-1")


@router.get(HEALTH_PATH, response_class=PlainTextResponse)
async def health_check(request: Request):
    """Basic liveness probe."""
    handler = resolve(request.method, raw_target(request))
    return to_plain_response(handler())
