"""
Record Intake Service — Security Headers Middleware
=====================================================

What:  Adds conservative security headers to every response.
How:   Sets each header only when the route has not already set it.

Headers:
    X-Content-Type-Options: nosniff        uploaded images keep their declared type
    X-Frame-Options: SAMEORIGIN
    Referrer-Policy: no-referrer
    Cross-Origin-Resource-Policy: same-site
    X-DNS-Prefetch-Control: off
    Strict-Transport-Security              HTTPS requests only
"""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

DEFAULT_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Resource-Policy": "same-site",
    "X-DNS-Prefetch-Control": "off",
}

HSTS_VALUE = "max-age=15552000; includeSubDomains"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        response = await call_next(request)

        for name, value in DEFAULT_HEADERS.items():
            response.headers.setdefault(name, value)

        if request.url.scheme == "https":
            response.headers.setdefault("Strict-Transport-Security", HSTS_VALUE)

        return response
