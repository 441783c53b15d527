import hashlib
import logging
import time
from typing import Callable, Container

from shortlink.core.errors import CodeSpaceExhaustedError

logger = logging.getLogger(__name__)

# Lowercase hex, 16^6 possible codes
SHORT_CODE_LENGTH = 6
DEFAULT_MAX_ATTEMPTS = 32


class CodeGenerator:
    """Derive short codes from the target URL and the time of the call.

    Codes only need to be unique, not unguessable; the hash spreads them
    evenly over the code space.
    """

    def __init__(self, max_attempts: int = DEFAULT_MAX_ATTEMPTS, clock: Callable[[], int] = time.time_ns):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.max_attempts = max_attempts
        self._clock = clock

    def candidate(self, target_url: str, attempt: int = 0) -> str:
        seed = f"{target_url}{self._clock()}:{attempt}"
        digest = hashlib.md5(seed.encode("utf-8"), usedforsecurity=False).hexdigest()
        return digest[:SHORT_CODE_LENGTH]

    def generate(self, target_url: str, existing_codes: Container[str]) -> str:
        for attempt in range(self.max_attempts):
            code = self.candidate(target_url, attempt)
            if code not in existing_codes:
                return code
            logger.info(f"Short code collision on attempt {attempt + 1}/{self.max_attempts}")

        raise CodeSpaceExhaustedError(
            f"Failed to generate unique short code after {self.max_attempts} attempts"
        )

