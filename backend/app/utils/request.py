"""Request utility functions."""

from fastapi import Request


def get_client_ip(request: Request, trust_proxy_headers: bool = True) -> str:
    """
    Best-effort client address for logging login attempts.

    With ``trust_proxy_headers`` the first X-Forwarded-For hop or X-Real-IP
    wins over the socket peer address.
    """
    if trust_proxy_headers:
        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            return forwarded.split(",")[0].strip()

        real_ip = request.headers.get("X-Real-IP")
        if real_ip:
            return real_ip.strip()

    if request.client:
        return request.client.host

    return "unknown"
