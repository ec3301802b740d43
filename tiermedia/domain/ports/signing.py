from __future__ import annotations
from typing import Protocol

class UrlSignerPort(Protocol):
    async def sign_url(self, path: str, ttl_seconds: int) -> str: ...
