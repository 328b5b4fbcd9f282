from collections.abc import Callable
from typing import TYPE_CHECKING

import httpx

if TYPE_CHECKING:
    from .models import Transaction

NextFn = Callable[[httpx.Request], httpx.Response]
Middleware = Callable[[httpx.Request, NextFn], httpx.Response]

TransportFactory = Callable[[], httpx.BaseTransport]
RequestFactory = Callable[..., httpx.Request]
HistoryObserver = Callable[["Transaction"], None]
