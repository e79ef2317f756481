"""
Fortress Admin — Session Token Codec.

A session token is ``"{issued_at}.{code}"`` where ``code`` is the
lowercase hex HMAC-SHA256 of the decimal ``issued_at`` text keyed by the
shared auth secret. Tokens carry no other state and expire by age only.
"""

from __future__ import annotations

import hashlib
import hmac
import re
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from fortress_admin.config import Settings

SEPARATOR = "."
_TIMESTAMP_RE = re.compile(r"[0-9]{1,18}")
_CODE_RE = re.compile(r"[0-9a-f]{64}")


class TokenStatus(str, Enum):
    """Outcome of verifying a session token."""
    VALID = "valid"
    EXPIRED = "expired"
    MALFORMED = "malformed"
    FORGED = "forged"
    FUTURE = "future"    # issued_at beyond the allowed clock skew


@dataclass(frozen=True)
class ParsedToken:
    issued_at: int
    code: str


def parse(token_text: str) -> Optional[ParsedToken]:
    """Split a token into its two fields. Returns None when malformed."""
    if not token_text:
        return None
    parts = token_text.split(SEPARATOR)
    if len(parts) != 2:
        return None
    timestamp, code = parts
    if not code or not _TIMESTAMP_RE.fullmatch(timestamp):
        return None
    return ParsedToken(issued_at=int(timestamp), code=code)


def compute_code(issued_at: int, secret: str) -> str:
    """HMAC-SHA256 of the decimal timestamp, lowercase hex."""
    return hmac.new(
        secret.encode("utf-8"),
        str(issued_at).encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()


def encode(issued_at: int, code: str) -> str:
    return f"{issued_at}{SEPARATOR}{code}"


def verify(
    token_text: str,
    secret: str,
    now: int,
    max_age_secs: int,
    clock_skew_secs: Optional[int] = None,
) -> TokenStatus:
    """
    Check a token against the secret at time ``now``.

    The age boundary is inclusive: a token exactly ``max_age_secs`` old is
    still valid. ``clock_skew_secs=None`` accepts any future ``issued_at``.
    """
    parsed = parse(token_text)
    if parsed is None:
        return TokenStatus.MALFORMED

    age = now - parsed.issued_at
    if age > max_age_secs:
        return TokenStatus.EXPIRED
    if clock_skew_secs is not None and -age > clock_skew_secs:
        return TokenStatus.FUTURE

    if not _CODE_RE.fullmatch(parsed.code):
        return TokenStatus.FORGED
    expected = compute_code(parsed.issued_at, secret)
    if not hmac.compare_digest(bytes.fromhex(parsed.code), bytes.fromhex(expected)):
        return TokenStatus.FORGED
    return TokenStatus.VALID


class TokenCodec:
    """Issues and verifies session tokens under one shared secret."""

    def __init__(
        self,
        secret: str,
        max_age_secs: int = 60 * 60 * 24 * 7,
        clock_skew_secs: Optional[int] = 300,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if not secret:
            raise ValueError("TokenCodec requires a non-empty secret")
        self._secret = secret
        self.max_age_secs = max_age_secs
        self.clock_skew_secs = clock_skew_secs
        self._clock = clock

    def now(self) -> int:
        return int(self._clock())

    def issue(self, issued_at: Optional[int] = None) -> str:
        """Mint a token stamped with ``issued_at`` (default: now)."""
        ts = self.now() if issued_at is None else issued_at
        return encode(ts, compute_code(ts, self._secret))

    def verify(self, token_text: str) -> TokenStatus:
        return verify(
            token_text,
            self._secret,
            self.now(),
            self.max_age_secs,
            self.clock_skew_secs,
        )

    def is_valid(self, token_text: Optional[str]) -> bool:
        return bool(token_text) and self.verify(token_text) is TokenStatus.VALID


def codec_from_settings(
    cfg: Settings, clock: Callable[[], float] = time.time,
) -> Optional[TokenCodec]:
    """Build the process codec, or None when no secret is configured."""
    if not cfg.auth_secret:
        return None
    return TokenCodec(
        cfg.auth_secret,
        max_age_secs=cfg.token_max_age_secs,
        clock_skew_secs=cfg.token_clock_skew_secs,
        clock=clock,
    )
