"""Per-session hue and identifier allocation for parsed constraints.

Each session owns one ConstraintAllocator and passes it to the parser.
There is no module-level pool: two sessions never share issued hues.
"""

import random
import threading
from uuid import uuid4

HUE_SPACE = 360
ID_LENGTH = 12


class HueAllocator:
    """Draws hues from [0, 360) without repeats until the pool is exhausted.

    Once all 360 hues have been issued the pool is cleared before the next
    draw, so collisions become possible again from that point on.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()
        self._issued: set[int] = set()
        self._lock = threading.Lock()

    @property
    def issued_count(self) -> int:
        """Number of hues issued since the last reset."""
        return len(self._issued)

    def allocate(self) -> int:
        """Return a hue not issued since the last reset."""
        with self._lock:
            if len(self._issued) >= HUE_SPACE:
                self._issued.clear()
            available = [h for h in range(HUE_SPACE) if h not in self._issued]
            hue = self._rng.choice(available)
            self._issued.add(hue)
            return hue

    def reset(self) -> None:
        """Forget all issued hues."""
        with self._lock:
            self._issued.clear()


class IdAllocator:
    """Issues short opaque constraint identifiers.

    Tokens are random; compare them for equality only.
    """

    def __init__(self) -> None:
        self._issued: set[str] = set()
        self._lock = threading.Lock()

    def allocate(self) -> str:
        with self._lock:
            while True:
                token = uuid4().hex[:ID_LENGTH]
                if token not in self._issued:
                    self._issued.add(token)
                    return token


class ConstraintAllocator:
    """Bundles the hue and id allocators of one session."""

    def __init__(
        self,
        *,
        hues: HueAllocator | None = None,
        ids: IdAllocator | None = None,
    ) -> None:
        self.hues = hues or HueAllocator()
        self.ids = ids or IdAllocator()

    def allocate_color(self) -> int:
        return self.hues.allocate()

    def allocate_id(self) -> str:
        return self.ids.allocate()
