"""In-memory key-value store for tests and demo terminals."""

from possync.core.interfaces import IKeyValueStore


class MemoryKeyValueStore(IKeyValueStore):
    """Process-local blob storage. Contents die with the process."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> str | None:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def keys(self) -> list[str]:
        return list(self._data)
