"""
Admin Key Check

Guards the cache administration endpoints. Keys come from
SCAMRADAR_ADMIN_KEYS (comma-separated). Only their SHA-256 hashes
are kept in memory. With no keys configured the check is disabled
(dev mode).
"""

from __future__ import annotations

import hashlib
import secrets
from typing import Optional

from fastapi import HTTPException, Security
from fastapi.security import APIKeyHeader

from scamradar.config import settings

ADMIN_KEY_HEADER = APIKeyHeader(name="X-Admin-Key", auto_error=False)


def _hash(key: str) -> str:
    return hashlib.sha256(key.encode()).hexdigest()


def load_key_hashes(raw: str) -> set[str]:
    return {_hash(k.strip()) for k in raw.split(",") if k.strip()}


_VALID_KEY_HASHES: set[str] = load_key_hashes(settings.ADMIN_KEYS)


def auth_enabled() -> bool:
    return len(_VALID_KEY_HASHES) > 0


def _verify_key(api_key: str) -> bool:
    """Verify an admin key against stored hashes."""
    if not api_key:
        return False
    return _hash(api_key) in _VALID_KEY_HASHES


async def require_admin_key(
    api_key: Optional[str] = Security(ADMIN_KEY_HEADER),
) -> Optional[str]:
    """
    FastAPI dependency — validates the admin key.

    Returns a short key hash for logging, or None in dev mode.
    """
    if not auth_enabled():
        return None

    if not api_key:
        raise HTTPException(
            status_code=401,
            detail="Missing admin key. Include X-Admin-Key header.",
        )

    if not _verify_key(api_key):
        raise HTTPException(
            status_code=403,
            detail="Invalid admin key.",
        )

    return _hash(api_key)[:12]


def generate_admin_key() -> str:
    """Generate a new admin key. Utility for key provisioning."""
    return f"sr_{secrets.token_urlsafe(32)}"
