"""
Read-through caching for async repository functions.
"""
import hashlib
from functools import wraps
from typing import Any, Callable
from sqlalchemy.ext.asyncio import AsyncSession
from weddinghub.cache.redis_client import cache
from weddinghub.core.logging import logger


def cache_key(key_prefix: str, args: tuple, kwargs: dict) -> str:
    """
    Build ``<prefix>:<digest>`` from the call arguments.

    Database sessions are left out, so every request asking for the same data
    shares one entry. Invalidate with ``cache.delete_pattern(f"{prefix}:*")``.
    """
    parts = [repr(arg) for arg in args if not isinstance(arg, AsyncSession)]
    parts += [f"{name}={value!r}" for name, value in sorted(kwargs.items())]
    digest = hashlib.sha1("|".join(parts).encode()).hexdigest()
    return f"{key_prefix}:{digest}"


def cached(key_prefix: str, expire: int = 300):
    """
    Cache the JSON-serialisable result of an async function for ``expire`` seconds.

    Usage:
        @cached('settings', expire=60)
        async def read_settings(db, keys):
            ...
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(*args, **kwargs) -> Any:
            key = cache_key(key_prefix, args, kwargs)
            hit = await cache.get(key)
            if hit is not None:
                logger.debug(f"Cache hit for {key}")
                return hit
            result = await func(*args, **kwargs)
            await cache.set(key, result, expire)
            return result
        return wrapper
    return decorator
