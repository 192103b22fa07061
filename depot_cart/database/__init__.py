# Persistence and catalog data

from .kv import KeyValueStore, InMemoryKeyValueStore, JsonFileKeyValueStore
from .carts import CartStore
from .catalog import InMemoryCatalog, AreaMaster

__all__ = [
    "KeyValueStore",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "CartStore",
    "InMemoryCatalog",
    "AreaMaster",
]
