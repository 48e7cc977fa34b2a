from __future__ import annotations

from urllib.parse import urlsplit


def normalize_base_url(base_url: str) -> str:
    cleaned = (base_url or "").strip().rstrip("/")
    if not cleaned:
        return ""
    # Providers that publish a versioned path (".../v1beta/openai") are used as-is.
    if urlsplit(cleaned).path not in {"", "/"}:
        return cleaned
    return f"{cleaned}/v1"
