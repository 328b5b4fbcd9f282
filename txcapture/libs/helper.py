import platform
import random
from collections.abc import Mapping
from typing import Any

BROWSER_USER_AGENTS = [
    # Chrome on Windows 10
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/115.0.0.0 Safari/537.36",
    # Firefox on Windows 10
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:109.0) Gecko/20100101 Firefox/115.0",
    # Safari on macOS
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/16.5 Safari/605.1.15",
    # Chrome on macOS
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/115.0.0.0 Safari/537.36",
    # Edge on Windows 10
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/115.0.0.0 Safari/537.36 Edg/115.0.1901.183",
    # Chrome on Android
    "Mozilla/5.0 (Linux; Android 10; K) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/115.0.0.0 Mobile Safari/537.36",
    # Safari on iOS
    "Mozilla/5.0 (iPhone; CPU iPhone OS 16_5 like Mac OS X) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/16.5 Mobile/15E148 Safari/604.1",
]


def merge_recursive_distinct(*mappings: Mapping[str, Any] | None) -> dict[str, Any]:
    """Merge mappings left to right; later values win.

    Nested mappings are merged recursively. When both sides hold a list, items of the
    later list are appended unless already present. Any other value (including objects
    such as a shared history handle) replaces the earlier one as-is, never copied.

    >>> merge_recursive_distinct(
    ...     {"headers": {"User-Agent": "a", "Accept-Language": "en"}, "timeout": 10},
    ...     {"headers": {"User-Agent": "b"}, "timeout": 20},
    ... )
    {'headers': {'User-Agent': 'b', 'Accept-Language': 'en'}, 'timeout': 20}
    """
    base: dict[str, Any] = {}
    for mapping in mappings:
        if not mapping:
            continue
        for key, value in mapping.items():
            current = base.get(key)
            if isinstance(value, Mapping) and isinstance(current, Mapping):
                base[key] = merge_recursive_distinct(current, value)
            elif isinstance(value, list) and isinstance(current, list):
                base[key] = current + [item for item in value if item not in current]
            elif isinstance(value, Mapping):
                base[key] = dict(value)
            else:
                base[key] = value
    return base


def minimal_user_agent() -> str:
    """User agent naming the client library plus the local OS and architecture.

    Examples: ``httpx (X11; Linux x86_64)``, ``httpx (Macintosh; arm64 Mac OS X)``,
    ``httpx (Windows NT 10.0; AMD64)``.
    """
    system = platform.system()
    architecture = platform.machine()
    if "linux" in system.lower():
        return f"httpx (X11; Linux {architecture})"
    elif "darwin" in system.lower():
        return f"httpx (Macintosh; {architecture} Mac OS X)"
    elif "windows" in system.lower():
        return f"httpx (Windows NT {platform.release()}; {architecture})"
    else:
        return f"httpx ({system}; {architecture})"


def default_options(rotate_user_agent: bool = False) -> dict[str, Any]:
    user_agent = random.choice(BROWSER_USER_AGENTS) if rotate_user_agent else minimal_user_agent()
    return {
        "headers": {
            "User-Agent": user_agent,
            "Accept-Language": "en-US,en;q=1.0",
            "Connection": "keep-alive",
            "Cache-Control": "no-cache",
        },
    }


def default_config(proxy: str | None = None) -> dict[str, Any]:
    return {"proxy": proxy} if proxy else {}
