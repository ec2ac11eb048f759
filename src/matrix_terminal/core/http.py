"""Shared httpx client factory.

Passing an explicit ``ssl.create_default_context()`` makes httpx load the
system certificate store, which some managed Python builds otherwise skip.
"""

from __future__ import annotations

import ssl
from typing import Any

import httpx

DEFAULT_USER_AGENT = "matrix-terminal/0.1.0"


def _ssl_context() -> ssl.SSLContext:
    return ssl.create_default_context()


def make_httpx_client(**kwargs: Any) -> httpx.AsyncClient:
    """Create an ``httpx.AsyncClient`` with system SSL verification.

    Accepts the same keyword arguments as ``httpx.AsyncClient``. Unless a
    ``timeout`` is given the client waits indefinitely, and a default
    User-Agent is merged into any provided headers.
    """
    kwargs.setdefault("verify", _ssl_context())
    kwargs.setdefault("timeout", None)
    headers = dict(kwargs.pop("headers", None) or {})
    headers.setdefault("User-Agent", DEFAULT_USER_AGENT)
    kwargs["headers"] = headers
    return httpx.AsyncClient(**kwargs)
