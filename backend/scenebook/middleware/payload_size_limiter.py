import json

from starlette.types import ASGIApp, Receive, Scope, Send
from fastapi import status


class PayloadSizeLimiter:
    """
    Reject write requests whose declared body is larger than the limit for
    their path. Breakdown payloads are small forms, so anything bigger is a
    client error.
    """
    def __init__(self, app: ASGIApp, path_limits: dict):
        """
        Args:
            path_limits: path prefix -> maximum body size in bytes, e.g.
                {"/api": 64 * 1024}
        """
        self.app = app
        self.path_limits = path_limits

    def _limit_for(self, path: str):
        for path_prefix, size_limit in self.path_limits.items():
            if path.startswith(path_prefix):
                return size_limit
        return None

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        limit = self._limit_for(scope.get("path", ""))
        if limit is not None:
            headers = dict(scope.get("headers") or [])
            content_length = headers.get(b"content-length")

            if content_length and content_length.isdigit() and int(content_length) > limit:
                error_body = {
                    "detail": f"Request body too large. Maximum size is {limit} bytes.",
                    "max_size_bytes": limit,
                    "request_size_bytes": int(content_length)
                }
                body_bytes = json.dumps(error_body).encode("utf-8")

                await send({
                    "type": "http.response.start",
                    "status": status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                    "headers": [
                        [b"content-type", b"application/json"],
                        [b"content-length", str(len(body_bytes)).encode()],
                    ],
                })
                await send({
                    "type": "http.response.body",
                    "body": body_bytes,
                })
                return

        await self.app(scope, receive, send)
