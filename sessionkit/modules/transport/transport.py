from datetime import UTC, datetime
from typing import Optional
from urllib.parse import parse_qsl, quote, unquote, urlencode, urlsplit, urlunsplit

from fastapi import Request, Response

COOKIE_PATH = "/"
_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def extract_token(request: Request, name: str) -> Optional[str]:
    """
    Find the session token carried by a request.

    The cookie wins over the URL query parameter when both are present.

    Args:
        request: Incoming request
        name: Cookie / query parameter name

    Returns:
        Unescaped token, or None if neither transport carries one
    """
    cookie = request.cookies.get(name)
    if cookie:
        return unquote(cookie)
    # Starlette has already percent-decoded query parameters
    return request.query_params.get(name) or None


def stage_token(response: Response, name: str, token: str, max_age: int) -> None:
    """
    Send a session token back to the client as a cookie.

    Args:
        response: Outgoing response
        name: Cookie name
        token: Session token
        max_age: Cookie lifetime in seconds; 0 issues a browser-session cookie
    """
    response.set_cookie(
        key=name,
        value=quote(token, safe=""),
        max_age=max_age if max_age > 0 else None,
        path=COOKIE_PATH,
        httponly=True,
    )


def expire_token(response: Response, name: str) -> None:
    """Tell the client to drop its session cookie immediately."""
    response.set_cookie(
        key=name,
        value="",
        max_age=-1,
        expires=_EPOCH,
        path=COOKIE_PATH,
        httponly=True,
    )


def rewrite_url(url: str, name: str, token: str) -> str:
    """
    Add (or replace) the session token as a query parameter on a link.

    Args:
        url: Absolute or relative URL
        name: Query parameter name
        token: Session token

    Returns:
        URL carrying the token
    """
    parts = urlsplit(url)
    query = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k != name]
    query.append((name, token))
    return urlunsplit(parts._replace(query=urlencode(query)))
