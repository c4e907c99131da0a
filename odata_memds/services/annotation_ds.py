"""Data source serving entity sets from in-memory stores of annotated domain classes."""

from __future__ import annotations

import logging
from collections.abc import Collection, Mapping
from typing import Any

import odata_memds.domain.annotation_helper as annotation_helper
from odata_memds.core.class_helper import load_classes
from odata_memds.domain.annotations import (
    EdmMediaResourceContent,
    EdmMediaResourceMimeType,
    Multiplicity,
)
from odata_memds.errors import NotFoundError, ODataNotImplementedError, ODataRuntimeError
from odata_memds.repositories.data_store import DataStore
from odata_memds.schemas.binary import BinaryData
from odata_memds.schemas.edm import EdmEntitySet, EdmFunctionImport
from odata_memds.services.data_source import ListsDataSource

logger = logging.getLogger(__name__)


def _is_collection(value: Any) -> bool:
    return isinstance(value, Collection) and not isinstance(value, (str, bytes, bytearray, Mapping))


class AnnotationInMemoryDs(ListsDataSource):
    """
    Serves every class decorated with @entity_set found in `package_to_scan`.

    Each entity set gets a fresh in-memory DataStore on construction.
    Everything runs synchronously on the caller's thread.
    """

    def __init__(self, package_to_scan: str):
        self._data_stores: dict[str, DataStore[Any]] = {}
        classes = load_classes(package_to_scan, annotation_helper.is_entity_set)
        self._init(classes)
        logger.info(
            "Registered %d entity sets from package %s: %s",
            len(self._data_stores),
            package_to_scan,
            ", ".join(self._data_stores),
        )

    def _init(self, classes: list[type]) -> None:
        for cls in classes:
            store = DataStore.create_in_memory(cls)
            self._data_stores[annotation_helper.get_entity_set_name(cls)] = store

    # ------------------------------------------------------------------
    # Entity set lookup
    # ------------------------------------------------------------------

    def entity_set_names(self) -> list[str]:
        return list(self._data_stores)

    def get_entity_set(self, name: str) -> EdmEntitySet:
        """Descriptor of the entity set called `name`."""
        if name not in self._data_stores:
            raise NotFoundError(f"Entity set '{name}' not found")
        return EdmEntitySet(name=name)

    def entity_set_for(self, data_type: type) -> EdmEntitySet:
        """Descriptor of the entity set backed by `data_type`."""
        for name, store in self._data_stores.items():
            if store.data_type_class is data_type:
                return EdmEntitySet(name=name)
        raise ODataRuntimeError(f"No entity set registered for type '{data_type.__name__}'.")

    def get_data_type(self, entity_set: EdmEntitySet) -> type:
        return self._get_data_store(entity_set).data_type_class

    def data_store_for(self, data_type: type) -> DataStore[Any]:
        """Store registered for `data_type`, or a new one if the type backs no entity set here."""
        for store in self._data_stores.values():
            if store.data_type_class is data_type:
                return store
        return DataStore.create_in_memory(data_type, keep_existing=True)

    # ------------------------------------------------------------------
    # ListsDataSource
    # ------------------------------------------------------------------

    def read_data(self, entity_set: EdmEntitySet) -> list[Any]:
        return self._get_data_store(entity_set).read()

    def read_entity(self, entity_set: EdmEntitySet, keys: Mapping[str, Any]) -> Any:
        store = self._get_data_store(entity_set)
        key_instance = store.create_instance()
        annotation_helper.set_key_fields(key_instance, keys)

        result = store.read_one(key_instance)
        if result is None:
            raise NotFoundError(f"Entity not found in entity set '{entity_set}'")
        return result

    def read_function_data(
        self,
        function: EdmFunctionImport,
        parameters: Mapping[str, Any],
        keys: Mapping[str, Any],
    ) -> Any:
        raise ODataNotImplementedError(f"Function import '{function}' is not supported")

    def read_related_data(
        self,
        source_entity_set: EdmEntitySet,
        source_data: Any,
        target_entity_set: EdmEntitySet,
        target_keys: Mapping[str, Any],
    ) -> Any:
        source_store = self._get_data_store(source_entity_set)
        target_store = self._get_data_store(target_entity_set)

        navigation_info = annotation_helper.get_common_navigation_info(
            source_store.data_type_class, target_store.data_type_class
        )
        if navigation_info is None:
            raise ODataRuntimeError(
                f"Missing source field for related data (sourceStore='{source_store}', "
                f"targetStore='{target_store}')."
            )

        navigation_value = annotation_helper.get_field_value(source_data, navigation_info.from_field)
        result_data = []
        for target in target_store.read():
            if _is_collection(navigation_value):
                for item in navigation_value:
                    if annotation_helper.key_match(target, item):
                        result_data.append(target)
            elif annotation_helper.key_match(target, navigation_value):
                result_data.append(target)

        if navigation_info.from_multiplicity == Multiplicity.MANY:
            if not target_keys:
                return result_data
            for result in result_data:
                if annotation_helper.key_match_values(result, target_keys):
                    return result
            return None

        if not result_data:
            return None
        return result_data[0]

    def read_binary_data(self, entity_set: EdmEntitySet, media_link_entry_data: Any) -> BinaryData:
        data = annotation_helper.get_value_for_field(media_link_entry_data, EdmMediaResourceContent)
        mime_type = annotation_helper.get_value_for_field(media_link_entry_data, EdmMediaResourceMimeType)
        return BinaryData(
            data=data,
            mime_type=str(mime_type) if mime_type is not None else None,
        )

    def new_data_object(self, entity_set: EdmEntitySet) -> Any:
        return self._get_data_store(entity_set).create_instance()

    def write_binary_data(
        self, entity_set: EdmEntitySet, media_link_entry_data: Any, binary_data: BinaryData
    ) -> None:
        raise ODataNotImplementedError(f"Writing media resources of '{entity_set}' is not supported")

    def update_data(self, entity_set: EdmEntitySet, data: Any) -> Any:
        """Replace the entity of `entity_set` with the key values of `data`."""
        return self._get_data_store(entity_set).update(data)

    def delete_data(self, entity_set: EdmEntitySet, keys: Mapping[str, Any]) -> None:
        store = self._get_data_store(entity_set)
        key_instance = store.create_instance()
        annotation_helper.set_key_fields(key_instance, keys)
        if store.delete(key_instance) is None:
            logger.debug("Nothing to delete in %s for keys %s", entity_set, dict(keys))

    def create_data(self, entity_set: EdmEntitySet, data: Any) -> None:
        self._get_data_store(entity_set).create(data)

    def delete_relation(
        self,
        source_entity_set: EdmEntitySet,
        source_data: Any,
        target_entity_set: EdmEntitySet,
        target_keys: Mapping[str, Any],
    ) -> None:
        raise ODataNotImplementedError("Deleting relations is not supported")

    def write_relation(
        self,
        source_entity_set: EdmEntitySet,
        source_data: Any,
        target_entity_set: EdmEntitySet,
        target_keys: Mapping[str, Any],
    ) -> None:
        raise ODataNotImplementedError("Writing relations is not supported")

    # ------------------------------------------------------------------

    def _get_data_store(self, entity_set: EdmEntitySet) -> DataStore[Any]:
        """
        Store registered for `entity_set`. Never returns None.

        Raises:
            ODataRuntimeError: If no store is registered under the entity set name
        """
        store = self._data_stores.get(entity_set.name)
        if store is None:
            raise ODataRuntimeError(f"No DataStore found for entity set '{entity_set}'.")
        return store
