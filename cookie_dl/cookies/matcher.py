"""
Decides whether a stored browser cookie belongs on an outgoing request.
"""

from yarl import URL

from cookie_dl.models.cookie import CookieRecord


def _as_url(url: URL | str) -> URL | None:
    if isinstance(url, URL):
        return url
    try:
        return URL(url)
    except (TypeError, ValueError):
        return None


def cookie_matches_url(cookie: CookieRecord, url: URL | str) -> bool:
    """
    Returns True if the cookie must be sent with a request to ``url``.

    Two conditions must both hold:

    1. Path: the URL path starts with the cookie path. This is a plain string
       prefix test, so a cookie for ``/foo`` is also sent to ``/foobar``.
    2. Domain: either the URL host equals the cookie domain exactly, or the
       host ends with the cookie domain (leading dot removed) and the
       character just before the first occurrence of that domain in the host
       is a dot::

           cookie domain    URL host             result
           here.foo.com     here.foo.com         match (identical)
           here.foo.com     there.here.foo.com   match (dot before suffix)
           here.foo.com     where.foo.com        no match (no dot before suffix)

    A URL without a host never matches.
    """
    parsed = _as_url(url)
    if parsed is None:
        return False
    host = parsed.raw_host
    if not host:
        return False

    cookie_domain = cookie.domain[1:] if cookie.domain.startswith(".") else cookie.domain

    # An absent substring leaves the offset at 0, which never has a dot before it.
    offset = max(host.find(cookie_domain), 0)
    dot_before_cookie_domain = offset > 0 and host[offset - 1] == "."

    path_matches = parsed.raw_path.startswith(cookie.path)
    domain_matches = host == cookie.domain or (
        host.endswith(cookie_domain) and dot_before_cookie_domain
    )
    return path_matches and domain_matches
