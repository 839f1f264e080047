"""Storage backend factory"""

from typing import Dict, Any, Optional, Type, List

from .base import StorageBackend
from .filesystem import FileSystemStorage
from .http import HttpStorage

DEFAULT_BACKENDS: Dict[str, Type[StorageBackend]] = {
    "http": HttpStorage,
    "filesystem": FileSystemStorage,
}


class StorageFactory:
    """Registry of storage backends by type name

    Each factory owns a copy of the registry; registering a backend on one
    factory leaves every other factory unchanged.
    """

    def __init__(self, backends: Optional[Dict[str, Type[StorageBackend]]] = None):
        self._backends = dict(DEFAULT_BACKENDS if backends is None else backends)

    def create(self, storage_type: str, config: Dict[str, Any] = None) -> StorageBackend:
        """Instantiate the backend registered as storage_type

        Raises:
            ValueError: If no backend has that name
        """
        try:
            backend_class = self._backends[storage_type]
        except KeyError:
            raise ValueError(
                f"Unsupported storage type: {storage_type} "
                f"(expected one of {', '.join(self.get_supported_types())})"
            ) from None
        return backend_class(config or {})

    def register_backend(self, storage_type: str, backend_class: Type[StorageBackend]) -> None:
        self._backends[storage_type] = backend_class

    def get_supported_types(self) -> List[str]:
        return list(self._backends)
