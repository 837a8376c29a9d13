"""Fixture pages and a fake website for ``httpx.MockTransport``."""
import io
from typing import Callable, Dict, List, Optional, Tuple

import httpx
from PIL import Image

EXAMPLE_DOMAIN_HTML = """
<!doctype html>
<html>
<head>
    <title>
        Example Domain
    </title>
    <meta charset="utf-8" />
</head>
<body><h1>Example Domain</h1></body>
</html>
"""

FULL_OG_HTML = """
<html>
<head>
    <title>Fallback title</title>
    <meta property="og:title" content="  OG Title  " />
    <meta name="twitter:title" content="Twitter Title" />
    <meta property="og:description" content="OG description" />
    <meta name="description" content="Plain description" />
    <meta property="og:image" content="/img.png" />
    <meta property="og:site_name" content=" Example Site " />
    <link rel="shortcut icon" href="/static/favicon.png" />
    <link rel="icon" href="icons/icon-32.png" />
</head>
<body></body>
</html>
"""


def png_bytes(size: Tuple[int, int] = (4, 4), color: str = "red") -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def _key(url) -> str:
    # httpx may add the root path when sending; routes ignore the difference
    return str(httpx.URL(str(url))).rstrip("/")


class FakeSite:
    """Routes for an ``httpx.MockTransport`` plus a log of every request seen."""

    def __init__(self) -> None:
        self.routes: Dict[Tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: List[httpx.Request] = []

    def page(self, url: str, html: str, status_code: int = 200) -> None:
        self.routes[("GET", _key(url))] = lambda request: httpx.Response(
            status_code, text=html, headers={"content-type": "text/html"}
        )

    def asset(self, url: str, content: bytes, method: str = "GET") -> None:
        self.routes[(method, _key(url))] = lambda request: httpx.Response(
            200, content=content
        )

    def route(
        self, method: str, url: str, handler: Callable[[httpx.Request], httpx.Response]
    ) -> None:
        self.routes[(method, _key(url))] = handler

    def calls(self, method: Optional[str] = None) -> List[httpx.Request]:
        return [r for r in self.requests if method is None or r.method == method]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, _key(request.url)))
        if route is None:
            return httpx.Response(404, text="not found")
        return route(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)
