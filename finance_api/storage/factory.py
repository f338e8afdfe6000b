"""Factory for creating the storage backend."""
from finance_api.config import Settings
from finance_api.errors import ConfigurationError
from finance_api.storage.base import Stores
from finance_api.storage.memory import MemoryStores
from finance_api.storage.mongo import MongoStores


def create_stores(settings: Settings) -> Stores:
    """
    Create the stores named by ``settings.storage_backend``.

    Args:
        settings: Application settings

    Returns:
        Stores instance, not yet connected

    Raises:
        ConfigurationError: Unknown backend, or mongo without credentials
    """
    backend = settings.storage_backend.lower()
    if backend == "memory":
        return MemoryStores()
    elif backend == "mongo":
        return MongoStores(settings)
    raise ConfigurationError(f"Unknown storage backend: {settings.storage_backend}")
