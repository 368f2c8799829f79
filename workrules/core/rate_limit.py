"""Rate limiting for the analysis endpoint using slowapi.

Every analysis costs a paid provider call, so uploads are limited per client.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request


def client_address(request: Request) -> str:
    """Client key: first X-Forwarded-For hop when behind a proxy, else peer address."""
    forwarded = request.headers.get("x-forwarded-for", "")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return get_remote_address(request)


limiter = Limiter(key_func=client_address)
