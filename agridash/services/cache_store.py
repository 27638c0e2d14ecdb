"""Weather response cache keyed by request fingerprint.

Freshness is decided by the caller (see ``CacheEntry.is_fresh``); stores only
remember the newest payload per fingerprint. Two backings are provided: a
bounded in-process LRU map, and Redis for deployments that run several
workers.
"""

from __future__ import annotations

import json
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol

from redis.asyncio import Redis

Clock = Callable[[], int]


def now_ms() -> int:
	return int(time.time() * 1000)


@dataclass(frozen=True, slots=True)
class CacheEntry:
	fingerprint: str
	timestamp: int
	payload: Any

	def is_fresh(self, now: int, ttl_ms: int) -> bool:
		return now - self.timestamp < ttl_ms


class CacheStore(Protocol):
	async def get(self, fingerprint: str) -> CacheEntry | None: ...

	async def put(self, fingerprint: str, payload: Any) -> None: ...


class InMemoryCacheStore:
	"""Process-local cache capped at ``max_entries`` with LRU eviction."""

	def __init__(self, max_entries: int = 1024, clock: Clock = now_ms) -> None:
		if max_entries < 1:
			raise ValueError("max_entries must be at least 1")
		self.max_entries = max_entries
		self.clock = clock
		self._entries: OrderedDict[str, CacheEntry] = OrderedDict()

	def __len__(self) -> int:
		return len(self._entries)

	async def get(self, fingerprint: str) -> CacheEntry | None:
		entry = self._entries.get(fingerprint)
		if entry is not None:
			self._entries.move_to_end(fingerprint)
		return entry

	async def put(self, fingerprint: str, payload: Any) -> None:
		self._entries[fingerprint] = CacheEntry(fingerprint, self.clock(), payload)
		self._entries.move_to_end(fingerprint)
		while len(self._entries) > self.max_entries:
			self._entries.popitem(last=False)


class RedisCacheStore:
	"""Redis-backed cache; the key expiry bounds how long stale entries linger."""

	def __init__(
		self,
		redis_client: Redis,
		retention_seconds: int = 3600,
		key_prefix: str = "weather:",
		clock: Clock = now_ms,
	) -> None:
		self.redis_client = redis_client
		self.retention_seconds = retention_seconds
		self.key_prefix = key_prefix
		self.clock = clock

	def _key(self, fingerprint: str) -> str:
		return f"{self.key_prefix}{fingerprint}"

	async def get(self, fingerprint: str) -> CacheEntry | None:
		raw = await self.redis_client.get(self._key(fingerprint))
		if raw is None:
			return None
		stored = json.loads(raw)
		return CacheEntry(fingerprint, int(stored["timestamp"]), stored["payload"])

	async def put(self, fingerprint: str, payload: Any) -> None:
		stored = {"timestamp": self.clock(), "payload": payload}
		await self.redis_client.setex(self._key(fingerprint), self.retention_seconds, json.dumps(stored))
