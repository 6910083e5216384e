from __future__ import annotations

from datetime import datetime

import pytest

from src.scholar_portal.scholar_portal.credentials.hashing import PasswordHasher

FAST_HASH_METHOD = "pbkdf2:sha256:1000"


@pytest.fixture
def fixed_now() -> datetime:
    # September: school year 2025-2026.
    return datetime(2025, 9, 15, 9, 30, 0)


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(FAST_HASH_METHOD)
