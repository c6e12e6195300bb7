from __future__ import annotations

from flask import Request


# Checked in order; X-Forwarded-For may carry a chain, the client comes first.
_IP_HEADERS = ("CF-Connecting-IP", "X-Real-IP", "X-Forwarded-For")


def get_client_ip(request: Request) -> str | None:
    for header in _IP_HEADERS:
        raw = request.headers.get(header, "")
        first = raw.split(",")[0].strip()
        if first:
            return first

    return request.remote_addr or None
