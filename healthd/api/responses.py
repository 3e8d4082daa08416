"""Response Rendering — PlainTextReply → Starlette response."""

from fastapi.responses import PlainTextResponse

from healthd.core.reply import PlainTextReply


def to_plain_response(reply: PlainTextReply) -> PlainTextResponse:
    return PlainTextResponse(
        reply.body, status_code=reply.status, media_type=reply.content_type,
    )
