"""
Institutional proxy rewriting for article links.

Applied when an article is opened, never when a feed is fetched.
"""

from dataclasses import dataclass
from enum import Enum
from urllib.parse import urlsplit, urlunsplit


class ProxyType(str, Enum):
    PREFIX = "prefix"
    DOMAIN_REPLACEMENT = "domainReplacement"


@dataclass(frozen=True)
class ProxySettings:
    """Proxy configuration supplied by the settings collaborator."""
    enabled: bool = False
    proxy_type: ProxyType = ProxyType.PREFIX
    root: str = ""


def proxied_url(url: str, settings: ProxySettings) -> str:
    """
    Rewrite an article URL through the configured proxy.

    - PREFIX: prepend the root unless the URL already contains it
    - DOMAIN_REPLACEMENT: "www.nejm.org" becomes "www-nejm-org.<root>"

    Returns the URL unchanged when the proxy is disabled, the root is empty,
    or the URL has no host.
    """
    if not settings.enabled or not settings.root:
        return url

    if settings.proxy_type == ProxyType.PREFIX:
        if settings.root in url:
            return url
        return settings.root + url

    try:
        parts = urlsplit(url)
        host = parts.hostname
        port = parts.port
    except ValueError:
        return url
    if not host:
        return url

    netloc = f"{host.replace('.', '-')}.{settings.root}"
    if port is not None:
        netloc = f"{netloc}:{port}"
    if parts.username:
        userinfo = parts.username
        if parts.password:
            userinfo = f"{userinfo}:{parts.password}"
        netloc = f"{userinfo}@{netloc}"

    return urlunsplit((parts.scheme, netloc, parts.path, parts.query, parts.fragment))
