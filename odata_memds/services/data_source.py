"""Contract between the OData protocol layer and a data source backed by plain object lists."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from odata_memds.schemas.binary import BinaryData
from odata_memds.schemas.edm import EdmEntitySet, EdmFunctionImport


class ListsDataSource(ABC):
    @abstractmethod
    def read_data(self, entity_set: EdmEntitySet) -> list[Any]:
        """All entities of `entity_set`."""

    @abstractmethod
    def read_entity(self, entity_set: EdmEntitySet, keys: Mapping[str, Any]) -> Any:
        """
        The entity of `entity_set` identified by `keys`.

        Raises:
            NotFoundError: If no entity has these keys
        """

    @abstractmethod
    def read_function_data(
        self,
        function: EdmFunctionImport,
        parameters: Mapping[str, Any],
        keys: Mapping[str, Any],
    ) -> Any:
        """Result of calling a function import."""

    @abstractmethod
    def read_related_data(
        self,
        source_entity_set: EdmEntitySet,
        source_data: Any,
        target_entity_set: EdmEntitySet,
        target_keys: Mapping[str, Any],
    ) -> Any:
        """
        Entities of `target_entity_set` reachable from `source_data`.

        Returns a list for a to-many navigation without `target_keys`, a single
        entity or None otherwise.
        """

    @abstractmethod
    def read_binary_data(self, entity_set: EdmEntitySet, media_link_entry_data: Any) -> BinaryData:
        """Media resource of a media link entry."""

    @abstractmethod
    def new_data_object(self, entity_set: EdmEntitySet) -> Any:
        """Empty instance of the type backing `entity_set`."""

    @abstractmethod
    def write_binary_data(
        self, entity_set: EdmEntitySet, media_link_entry_data: Any, binary_data: BinaryData
    ) -> None:
        pass

    @abstractmethod
    def update_data(self, entity_set: EdmEntitySet, data: Any) -> Any:
        pass

    @abstractmethod
    def delete_data(self, entity_set: EdmEntitySet, keys: Mapping[str, Any]) -> None:
        pass

    @abstractmethod
    def create_data(self, entity_set: EdmEntitySet, data: Any) -> None:
        pass

    @abstractmethod
    def delete_relation(
        self,
        source_entity_set: EdmEntitySet,
        source_data: Any,
        target_entity_set: EdmEntitySet,
        target_keys: Mapping[str, Any],
    ) -> None:
        pass

    @abstractmethod
    def write_relation(
        self,
        source_entity_set: EdmEntitySet,
        source_data: Any,
        target_entity_set: EdmEntitySet,
        target_keys: Mapping[str, Any],
    ) -> None:
        pass
