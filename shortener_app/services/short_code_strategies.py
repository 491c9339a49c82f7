"""
Short code generation strategies for URL shortener.
Uses Strategy Pattern so the service does not care where codes come from.
"""

import base64
import re
import secrets
from abc import ABC, abstractmethod
from typing import Callable

from shortener_app.services.exceptions import ShortCodeGenerationError


# An entropy source fills n bytes in one call, like secrets.token_bytes
EntropySource = Callable[[int], bytes]

SHORT_CODE_BYTES = 6
SHORT_CODE_LENGTH = 8  # base64 of 6 bytes, no padding needed

_SHORT_CODE_RE = re.compile(r"^[A-Za-z0-9_-]{%d}$" % SHORT_CODE_LENGTH)


def generate_short_code(entropy_source: EntropySource) -> str:
    """
    Create a random 8 character short code.

    Draws 6 bytes from the entropy source and encodes them with the
    URL-safe base64 alphabet, giving 2^48 possible codes. The encoding is
    deterministic: all randomness comes from the source.

    Raises:
        ShortCodeGenerationError: the source failed or returned a short read
    """
    try:
        raw = entropy_source(SHORT_CODE_BYTES)
    except Exception as e:
        raise ShortCodeGenerationError(f"error creating short code: {e}") from e

    if raw is None or len(raw) != SHORT_CODE_BYTES:
        got = 0 if raw is None else len(raw)
        raise ShortCodeGenerationError(
            f"unable to read data needed to create short code "
            f"(wanted {SHORT_CODE_BYTES} bytes, got {got})"
        )

    return base64.urlsafe_b64encode(bytes(raw)).decode("ascii")


def is_valid_short_code(short_code: str) -> bool:
    """True if short_code is 8 URL-safe base64 chars decoding to 6 bytes."""
    if not _SHORT_CODE_RE.match(short_code):
        return False
    try:
        decoded = base64.urlsafe_b64decode(short_code)
    except ValueError:
        return False
    return len(decoded) == SHORT_CODE_BYTES


class ShortCodeStrategy(ABC):
    """Abstract base class for short code generation strategies"""

    @abstractmethod
    def generate(self) -> str:
        """
        Generate a candidate short code.

        Uniqueness is not checked here. The storage rejects duplicates on
        insert and the service retries with a fresh candidate.

        Returns:
            A short code string
        """
        pass


class RandomShortCodeStrategy(ShortCodeStrategy):
    """
    Random generation strategy backed by an injectable entropy source.

    Pros: Unpredictable, no coordination between servers
    Cons: Collisions are possible (rare in a 2^48 space), so inserts can fail

    Pass a deterministic source in tests to force collisions.
    """

    def __init__(self, entropy_source: EntropySource = secrets.token_bytes):
        self.entropy_source = entropy_source

    def generate(self) -> str:
        return generate_short_code(self.entropy_source)
