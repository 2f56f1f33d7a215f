"""XML repository interface definition.

This module defines the contract a key-management subsystem uses to persist
its keyring. Backends implement exactly these two operations.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from xml.etree.ElementTree import Element


class XmlRepository(ABC):
    """Abstract interface for data-protection key storage backends.

    Keys are handed over as XML elements and treated as opaque documents. The
    backend is the system of record; implementations hold no cache.
    """

    @abstractmethod
    def get_all_elements(self) -> Sequence[Element]:
        """Return every key element currently stored.

        Returns:
            Read-only collection of XML elements in no guaranteed order.

        Raises:
            Exception: If the backend cannot be enumerated
        """
        pass

    @abstractmethod
    def store_element(self, element: Element, friendly_name: str | None = None) -> str:
        """Persist a single key element.

        Args:
            element: The XML element to store (not mutated or retained)
            friendly_name: Optional name for the stored entry; must be unique
                within the backend when given

        Returns:
            The name under which the element was stored

        Raises:
            Exception: If the element cannot be stored
        """
        pass
