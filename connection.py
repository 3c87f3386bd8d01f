# connection.py

import logging

from constants import LOGGER_NAME

logger = logging.getLogger(LOGGER_NAME)


def pair_key(a, b) -> tuple:
    """Canonical key for an unordered pair of sparks: smaller id first."""
    if a.id < b.id:
        return (a.id, b.id)
    return (b.id, a.id)


class Connection:
    """
    A smoothed, persistent link between two nearby sparks.

    Strength tracks the instantaneous proximity weight through a first-order
    filter so that jittery distances do not make lines flicker.
    """
    def __init__(self, a, b):
        if a.id > b.id:
            a, b = b, a
        self.a = a
        self.b = b
        self.key = (a.id, b.id)
        self.strength = 0.0

    def __repr__(self):
        return f"Connection({self.key[0]}<->{self.key[1]}, strength={self.strength:.3f})"

    def approach(self, target: float, dt: float, rate_per_sec: float) -> float:
        """Moves strength toward target by min(1, rate * dt) of the gap, then clamps."""
        blend = min(1.0, max(0.0, rate_per_sec * dt))
        self.strength += (target - self.strength) * blend
        self.strength = min(1.0, max(0.0, self.strength))
        return self.strength

    def involves(self, spark_ids) -> bool:
        return self.key[0] in spark_ids or self.key[1] in spark_ids


class ConnectionLedger:
    """
    Sparse map of pair key -> Connection.

    Data Contract:
    - At most one Connection per unordered pair.
    - Connections are created lazily by get_or_create() and removed by
      fade_inactive() (strength reached 0) or purge() (an endpoint died).
    """
    def __init__(self):
        self._connections = {}

    def __len__(self):
        return len(self._connections)

    def __iter__(self):
        return iter(list(self._connections.values()))

    def __contains__(self, key):
        return key in self._connections

    def get(self, a, b):
        return self._connections.get(pair_key(a, b))

    def get_or_create(self, a, b) -> Connection:
        key = pair_key(a, b)
        connection = self._connections.get(key)
        if connection is None:
            connection = Connection(a, b)
            self._connections[key] = connection
        return connection

    def fade_inactive(self, active_keys, dt: float, fade_per_sec: float) -> int:
        """
        Weakens every connection not refreshed this frame and drops the ones
        that reach zero. Returns the number removed.
        """
        step = fade_per_sec * dt
        expired = []
        for key, connection in self._connections.items():
            if key in active_keys:
                continue
            connection.strength -= step
            if connection.strength <= 0.0:
                expired.append(key)
        for key in expired:
            del self._connections[key]
        return len(expired)

    def purge(self, dead_ids) -> int:
        """Removes every connection touching one of dead_ids. Returns the number removed."""
        if not dead_ids:
            return 0
        stale = [key for key, connection in self._connections.items() if connection.involves(dead_ids)]
        for key in stale:
            del self._connections[key]
        if stale:
            logger.debug(f"Purged {len(stale)} connection(s) with dead endpoints.")
        return len(stale)

    def clear(self):
        self._connections.clear()
