"""
Translation Cache Service
Caches word lookups from the reading view so repeated clicks on the same word
in the same text do not cost another AI call.
"""

import hashlib
import json
import logging
import time
from typing import Any, Optional

import redis

logger = logging.getLogger(__name__)

STATS_KEY = "translation_cache_stats"


class TranslationCache:
    """
    Redis cache of lookup results keyed by normalized word and context.

    Cache failures are logged and treated as misses; they never fail a lookup.
    """

    def __init__(self, redis_client, ttl=30 * 24 * 3600):
        self.redis = redis_client
        self.ttl = ttl  # 30 days default
        self.prefix = "translation:"

    def _generate_key(self, word: str, context: str = "") -> str:
        """Generate a consistent cache key for the word in its context"""
        normalized_word = word.lower().strip()
        context_hash = hashlib.md5(context.strip().encode("utf-8")).hexdigest()
        word_hash = hashlib.md5(normalized_word.encode("utf-8")).hexdigest()
        return f"{self.prefix}{word_hash}:{context_hash}"

    def _update_stats(self, hit: bool):
        try:
            self.redis.hincrby(STATS_KEY, "cache_hits" if hit else "cache_misses", 1)
        except redis.RedisError as e:
            logger.warning(f"Failed to update cache stats: {e}")

    def get(self, word: str, context: str = "") -> Optional[dict[str, Any]]:
        """
        Get a cached lookup result

        Returns:
            Cached translation data or None if not found
        """
        try:
            cached_data = self.redis.get(self._generate_key(word, context))
        except redis.RedisError as e:
            logger.error(f"Error getting cached translation for '{word}': {e}")
            return None

        if not cached_data:
            self._update_stats(hit=False)
            logger.debug(f"Cache MISS for word: {word}")
            return None

        try:
            result = json.loads(cached_data)
        except json.JSONDecodeError:
            self._update_stats(hit=False)
            return None

        self._update_stats(hit=True)
        logger.debug(f"Cache HIT for word: {word}")
        return result

    def set(self, word: str, context: str, translation_data: dict[str, Any]) -> bool:
        """
        Cache a lookup result

        Returns:
            True if successfully cached, False otherwise
        """
        enhanced_data = {
            **translation_data,
            "cached_at": int(time.time()),
            "word_normalized": word.lower().strip(),
        }
        try:
            success = self.redis.setex(
                self._generate_key(word, context), self.ttl, json.dumps(enhanced_data)
            )
        except redis.RedisError as e:
            logger.error(f"Error caching translation for '{word}': {e}")
            return False

        return bool(success)

    def get_stats(self) -> dict[str, Any]:
        try:
            stats_raw = self.redis.hgetall(STATS_KEY)
        except redis.RedisError as e:
            logger.error(f"Error getting cache stats: {e}")
            return {"error": str(e), "cache_hits": 0, "cache_misses": 0, "hit_rate_percent": 0.0}

        # Convert bytes keys/values to strings if needed (for fakeredis compatibility)
        stats = {}
        for k, v in stats_raw.items():
            key = k.decode() if isinstance(k, bytes) else k
            value = v.decode() if isinstance(v, bytes) else v
            stats[key] = int(value)

        hits = stats.get("cache_hits", 0)
        misses = stats.get("cache_misses", 0)
        total_requests = hits + misses
        return {
            "cache_hits": hits,
            "cache_misses": misses,
            "total_requests": total_requests,
            "hit_rate_percent": round(hits / max(1, total_requests) * 100, 2),
        }

    def clear_cache(self) -> int:
        """Delete cached lookups in SCAN batches; the stats hash is kept."""
        cleared = 0
        batch = []
        try:
            for key in self.redis.scan_iter(match=f"{self.prefix}*", count=500):
                batch.append(key)
                if len(batch) == 500:
                    cleared += self.redis.delete(*batch)
                    batch = []
            if batch:
                cleared += self.redis.delete(*batch)
        except redis.RedisError as e:
            logger.error(f"Cache cleared partially ({cleared} entries): {e}")
            return cleared

        logger.info(f"Cleared {cleared} translation cache entries")
        return cleared
