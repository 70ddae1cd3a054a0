"""Registry of transition store kinds.

Configuration files name their store by kind (``"symbol"``, ``"range"``,
``"callable"``); the registry maps those names to store classes. Additional
store classes can be registered by applications.

Example:
    ```python
    from nfakit.stores.registry import store_registry

    store_registry.register("mine", MyTransitionStore)
    factory = store_registry.factory("mine")
    automaton = Automaton(factory)
    ```
"""

import logging
import threading
from typing import Dict, List, Type

from nfakit.exceptions import ConfigurationError, OperationError
from nfakit.stores.base import ITransitionStore, StoreFactory
from nfakit.stores.callables import CallableTransitionStore
from nfakit.stores.ranges import RangeTransitionStore
from nfakit.stores.symbol import SymbolTransitionStore

logger = logging.getLogger(__name__)


class StoreRegistry:
    """Thread-safe registry of store classes keyed by kind.

    Attributes:
        name: Name of the registry (for error messages).
    """

    def __init__(self, name: str = "stores"):
        self._name = name
        self._items: Dict[str, Type[ITransitionStore]] = {}
        self._lock = threading.RLock()

    @property
    def name(self) -> str:
        return self._name

    def register(
        self,
        key: str,
        store_cls: Type[ITransitionStore],
        allow_overwrite: bool = False,
    ) -> None:
        """Register a store class under ``key``.

        Raises:
            OperationError: If ``key`` is taken and allow_overwrite is False.
        """
        with self._lock:
            if not allow_overwrite and key in self._items:
                raise OperationError(
                    f"Store kind '{key}' already registered in {self._name}",
                    context={"key": key, "registry": self._name},
                )
            self._items[key] = store_cls
            logger.debug("Registered store kind %r -> %s", key, store_cls.__name__)

    def get(self, key: str) -> Type[ITransitionStore]:
        """Return the store class registered under ``key``.

        Raises:
            ConfigurationError: If no class is registered under ``key``.
        """
        with self._lock:
            if key not in self._items:
                raise ConfigurationError(
                    f"Unknown store kind: {key}",
                    context={"key": key, "registry": self._name, "available_keys": list(self._items)},
                )
            return self._items[key]

    def has(self, key: str) -> bool:
        with self._lock:
            return key in self._items

    def list_keys(self) -> List[str]:
        with self._lock:
            return list(self._items)

    def factory(self, key: str) -> StoreFactory:
        """Return a factory producing empty stores of kind ``key``."""
        return StoreFactory(self.get(key))


store_registry = StoreRegistry()
for _store_cls in (SymbolTransitionStore, RangeTransitionStore, CallableTransitionStore):
    store_registry.register(_store_cls.kind, _store_cls)
