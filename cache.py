import time
import logging

logger = logging.getLogger(__name__)


class TtlCache:
    """Small in-process map whose entries go stale after ``ttl`` seconds.

    Expiry is checked on read against the wall clock; there is no
    background sweeper.
    """

    def __init__(self, ttl, clock=time.time):
        self.ttl = ttl
        self.clock = clock
        self._entries = {}

    def get(self, key):
        entry = self._entries.get(key)
        if entry is None:
            return None
        stored_at, value = entry
        if self.clock() - stored_at >= self.ttl:
            del self._entries[key]
            return None
        logger.debug("Cache hit for %s", key)
        return value

    def set(self, key, value):
        self._entries[key] = (self.clock(), value)
        return value

    def invalidate(self, key):
        self._entries.pop(key, None)

    def clear(self):
        self._entries.clear()

    def __len__(self):
        return len(self._entries)
