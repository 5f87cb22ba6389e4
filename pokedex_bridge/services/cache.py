from __future__ import annotations
import math
import threading
import time
from typing import Any, Callable, Dict, Iterator, List, Optional


class CacheConfigError(ValueError):
    pass


class _Node:
    __slots__ = ("key", "value", "expiry", "prev", "next")

    def __init__(self, key: Optional[str] = None, value: Any = None, expiry: float = 0.0):
        self.key = key
        self.value = value
        self.expiry = expiry
        self.prev: Optional[_Node] = None
        self.next: Optional[_Node] = None


class LRUCache:
    """Bounded key/value store with LRU eviction and a per-entry TTL.

    Recency is kept in a doubly-linked list between two sentinels: the node
    after ``_head`` is the least recently used, the node before ``_tail`` the
    most recently used. Expired entries are dropped lazily by ``get``.
    """

    def __init__(self, capacity: int = 100, ttl: float = 600.0,
                 clock: Callable[[], float] = time.time):
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity <= 0:
            raise CacheConfigError(f"capacity must be a positive integer, got {capacity!r}")
        if (isinstance(ttl, bool) or not isinstance(ttl, (int, float))
                or not math.isfinite(ttl) or ttl < 0):
            raise CacheConfigError(f"ttl must be a finite non-negative number, got {ttl!r}")
        self.capacity = capacity
        self.ttl = float(ttl)
        self._clock = clock
        self._lock = threading.Lock()
        self._map: Dict[str, _Node] = {}
        self._head = _Node()
        self._tail = _Node()
        self._head.next = self._tail
        self._tail.prev = self._head

    def _unlink(self, node: _Node) -> None:
        node.prev.next = node.next
        node.next.prev = node.prev
        node.prev = node.next = None

    def _append(self, node: _Node) -> None:
        last = self._tail.prev
        last.next = node
        node.prev = last
        node.next = self._tail
        self._tail.prev = node

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            node = self._map.get(key)
            if node is None:
                return default
            if self._clock() > node.expiry:
                self._unlink(node)
                del self._map[key]
                return default
            self._unlink(node)
            self._append(node)
            return node.value

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            old = self._map.pop(key, None)
            if old is not None:
                # overwriting never evicts
                self._unlink(old)
            elif len(self._map) >= self.capacity:
                lru = self._head.next
                self._unlink(lru)
                del self._map[lru.key]
            node = _Node(key, value, self._clock() + self.ttl)
            self._map[key] = node
            self._append(node)

    def delete(self, key: str) -> bool:
        with self._lock:
            node = self._map.pop(key, None)
            if node is None:
                return False
            self._unlink(node)
            return True

    def clear(self) -> None:
        with self._lock:
            self._map.clear()
            self._head.next = self._tail
            self._tail.prev = self._head

    def keys(self) -> List[str]:
        """Resident keys, least recently used first. Expired entries included."""
        with self._lock:
            return list(self._iter_keys())

    def _iter_keys(self) -> Iterator[str]:
        node = self._head.next
        while node is not self._tail:
            yield node.key
            node = node.next

    def __contains__(self, key: str) -> bool:
        node = self._map.get(key)
        return node is not None and self._clock() <= node.expiry

    def __len__(self) -> int:
        return len(self._map)

    def __repr__(self) -> str:
        return f"LRUCache(capacity={self.capacity}, ttl={self.ttl}, size={len(self._map)})"
