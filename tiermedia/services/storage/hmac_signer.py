from __future__ import annotations

import hashlib
import hmac
import time
from typing import Callable
from urllib.parse import quote

from tiermedia.common.path.safe import normalize_object_path
from tiermedia.domain.ports.signing import UrlSignerPort


class HmacUrlSigner(UrlSignerPort):
    """
    Mints time-limited URLs for objects in one bucket:

        {base_url}/{bucket}/{path}?expires=<epoch>&token=<hex hmac-sha256>

    The token covers bucket, normalized path and expiry, so a URL cannot be
    reused for another object or past its deadline. ``verify`` is the
    counterpart used by the storage route.
    """

    def __init__(
        self,
        secret: str,
        base_url: str,
        bucket: str,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if not secret:
            raise ValueError("signing secret is required")
        self._secret = secret.encode("utf-8")
        self.base_url = base_url.rstrip("/")
        self.bucket = bucket.strip("/")
        self._clock = clock

    def _token(self, path: str, expires: int) -> str:
        msg = f"{self.bucket}/{path}:{expires}".encode("utf-8")
        return hmac.new(self._secret, msg, hashlib.sha256).hexdigest()

    async def sign_url(self, path: str, ttl_seconds: int) -> str:
        obj = normalize_object_path(path)
        expires = int(self._clock()) + int(ttl_seconds)
        token = self._token(obj, expires)
        return f"{self.base_url}/{self.bucket}/{quote(obj)}?expires={expires}&token={token}"

    def verify(self, bucket: str, path: str, expires: int, token: str) -> bool:
        if bucket.strip("/") != self.bucket:
            return False
        try:
            obj = normalize_object_path(path)
        except ValueError:
            return False
        if int(expires) <= int(self._clock()):
            return False
        return hmac.compare_digest(self._token(obj, int(expires)), token or "")
