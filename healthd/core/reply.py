"""Plain-Text Replies — the only response shapes healthd ever produces.

Invariants:
    - Replies are immutable values; listeners only encode and send them
    - Media type is always text/plain
"""

from dataclasses import dataclass

TEXT_PLAIN = "text/plain"


@dataclass(frozen=True)
class PlainTextReply:
    status: int
    body: str
    content_type: str = TEXT_PLAIN

    def encoded(self) -> bytes:
        return self.body.encode("utf-8")


HEALTHY = PlainTextReply(status=200, body="OK\n")
NOT_FOUND = PlainTextReply(status=404, body="Not Found\n")
INTERNAL_ERROR = PlainTextReply(status=500, body="Internal Server Error\n")
