from __future__ import annotations

import hmac
from typing import Optional

from fastapi import Request


class Credential:
    """
    A single shared secret. Comparison is constant-time, but this is a
    password gate and not an authorization model.

    An unset secret matches nothing, so writes stay closed until one is configured.
    """

    def __init__(self, secret: str = ""):
        self._secret = (secret or "").strip()

    @property
    def configured(self) -> bool:
        return bool(self._secret)

    def matches(self, presented: Optional[str]) -> bool:
        if not self._secret or not presented:
            return False
        return hmac.compare_digest(self._secret.encode("utf-8"), presented.strip().encode("utf-8"))

    def __repr__(self) -> str:
        return f"Credential(configured={self.configured})"


def bearer_token(request: Request) -> str:
    auth = request.headers.get("authorization") or ""
    scheme, _, token = auth.partition(" ")
    if scheme.lower() != "bearer":
        return ""
    return token.strip()
