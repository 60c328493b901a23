from .store import KeyValueStore, MemoryStore, JsonFileStore, make_store

__all__ = [
    "KeyValueStore",
    "MemoryStore",
    "JsonFileStore",
    "make_store",
]
