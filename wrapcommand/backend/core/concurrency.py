"""
Concurrency Infrastructure.

Named semaphores that cap concurrent access to shared dependencies.
Sizing is configured in config/settings/concurrency.yaml under ``semaphores``.

Usage:
    from wrapcommand.backend.core.concurrency import get_semaphore

    async with get_semaphore("external_api"):
        response = await client.post(url, json=payload)
"""

import asyncio

from wrapcommand.backend.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_CAPACITY = 20

_semaphores: dict[str, asyncio.Semaphore] = {}


def get_semaphore(name: str) -> asyncio.Semaphore:
    """Get a named semaphore, creating it lazily from concurrency.yaml.

    Names not present in the config get DEFAULT_CAPACITY.
    """
    if name not in _semaphores:
        from wrapcommand.backend.core.config import get_app_config
        semaphore_config = get_app_config().concurrency.semaphores
        capacity = getattr(semaphore_config, name, DEFAULT_CAPACITY)
        _semaphores[name] = asyncio.Semaphore(capacity)
        logger.debug("Semaphore created", extra={"name": name, "capacity": capacity})
    return _semaphores[name]


def reset_semaphores() -> None:
    """Drop all semaphores. Called during application shutdown."""
    _semaphores.clear()
    logger.debug("Semaphores cleared")
