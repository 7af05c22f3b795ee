"""Single-slot cache for an OAuth access token."""

import time
from typing import Callable, Optional

# Seconds before the provider's expiry at which a token stops being reused.
EXPIRY_MARGIN = 60


class TokenCache:
    """Holds one access token and the epoch second it expires at.

    Not guarded by a lock.  Two coroutines that both miss may both fetch
    and both store; the last ``store()`` wins, which is harmless because
    either token is a valid credential.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self.clock = clock
        self.value: Optional[str] = None
        self.expires_at: float = 0

    def get(self, now: Optional[float] = None) -> Optional[str]:
        """Return the cached token if *now* is still outside the expiry margin."""
        if now is None:
            now = self.clock()
        if self.value and now < self.expires_at - EXPIRY_MARGIN:
            return self.value
        return None

    def store(self, value: str, expires_in: float, now: float) -> None:
        self.value = value
        self.expires_at = now + expires_in
