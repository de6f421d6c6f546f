from __future__ import annotations

import secrets
import time
import uuid

CODE_PREFIX = "BKG"


def generate_verification_code(beneficiary_id: str, now_ns: int | None = None) -> str:
    """BKG-<ns timestamp>-<beneficiary>-<16 hex chars of randomness>."""
    if now_ns is None:
        now_ns = time.time_ns()
    return f"{CODE_PREFIX}-{now_ns}-{beneficiary_id}-{secrets.token_hex(8)}"


def new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex}"
