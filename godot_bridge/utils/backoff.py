"""
Backoff timing for reconnect loops
"""

import random


class BackoffTimer:
    """Exponential backoff timer

    Provides exponential backoff with jitter for reconnect attempts.
    A factor of 1.0 yields a fixed delay.
    """

    def __init__(self,
                 initial: float = 5.0,
                 maximum: float = 60.0,
                 factor: float = 2.0,
                 jitter: float = 0.1):
        """Initialize backoff timer

        Args:
            initial: First delay (seconds)
            maximum: Upper bound for any delay (seconds)
            factor: Growth factor per attempt
            jitter: Jitter ratio (0-1)
        """
        if initial <= 0 or maximum <= 0:
            raise ValueError("Backoff delays must be positive")
        if factor < 1.0:
            raise ValueError("Backoff factor must be >= 1.0")
        if not 0 <= jitter <= 1:
            raise ValueError("Backoff jitter must be between 0 and 1")
        self.initial = initial
        self.maximum = maximum
        self.factor = factor
        self.jitter = jitter
        self.attempts = 0

    def reset(self):
        """Reset attempt count"""
        self.attempts = 0

    def next_delay(self) -> float:
        """Get next delay time (seconds)"""
        delay = min(self.initial * (self.factor ** self.attempts), self.maximum)

        if self.jitter > 0:
            jitter_amount = delay * self.jitter
            delay = delay - jitter_amount + (random.random() * jitter_amount * 2)

        self.attempts += 1
        return delay
