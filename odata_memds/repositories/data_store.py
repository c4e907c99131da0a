"""In-memory store of the instances of one domain class, keyed by their key fields."""

from __future__ import annotations

import itertools
import logging
import threading
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

import odata_memds.domain.annotation_helper as annotation_helper
from odata_memds.errors import DataStoreError

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

# One store per domain class for the lifetime of the process
_stores: dict[type, "DataStore[Any]"] = {}
_stores_lock = threading.Lock()


class DataStore(Generic[T]):
    def __init__(self, data_type: type[T]):
        self._data_type = data_type
        self._records: dict[tuple, T] = {}
        self._id_counter = itertools.count(1)
        self._lock = threading.RLock()

    @classmethod
    def create_in_memory(cls, data_type: type[T], keep_existing: bool = False) -> "DataStore[T]":
        """
        Return the process-wide store for `data_type`.

        Unless `keep_existing` is set a fresh, empty store replaces any store
        previously registered for the class.
        """
        with _stores_lock:
            store = _stores.get(data_type)
            if store is None or not keep_existing:
                store = cls(data_type)
                _stores[data_type] = store
                logger.debug("Created in-memory store for %s", data_type.__name__)
            return store

    @property
    def data_type_class(self) -> type[T]:
        return self._data_type

    def __repr__(self) -> str:
        return f"DataStore({self._data_type.__name__}, records={len(self._records)})"

    def create_instance(self) -> T:
        """New instance of the store's type without running validation."""
        return self._data_type.model_construct()

    def read(self) -> list[T]:
        """Snapshot of all stored records."""
        with self._lock:
            return list(self._records.values())

    def read_one(self, obj: T) -> T | None:
        """Stored record with the same key values as `obj`."""
        keys = self._get_keys(obj)
        with self._lock:
            return self._records.get(keys)

    def create(self, obj: T) -> T:
        """
        Store `obj`.

        If a key value is missing or the key is already taken, new key values
        are generated and written to `obj` before it is stored.
        """
        if not annotation_helper.get_key_fields(self._data_type):
            raise DataStoreError(f"Type '{self._data_type.__name__}' declares no EdmKey fields.")

        with self._lock:
            keys = self._get_keys(obj)
            while any(value is None for value in keys) or keys in self._records:
                keys = self._create_set_and_get_keys(obj)
            self._records[keys] = obj
        return obj

    def update(self, obj: T) -> T:
        """Replace the record stored under the keys of `obj` (inserting it if absent)."""
        with self._lock:
            keys = self._get_keys(obj)
            self._records.pop(keys, None)
            self._records[keys] = obj
        return obj

    def delete(self, obj: T) -> T | None:
        """Remove the record with the keys of `obj`; returns it, or None if there was none."""
        with self._lock:
            return self._records.pop(self._get_keys(obj), None)

    def _get_keys(self, obj: T) -> tuple:
        return tuple(annotation_helper.get_key_values(obj).values())

    def _create_set_and_get_keys(self, obj: T) -> tuple:
        values = []
        for key in annotation_helper.get_key_fields(self._data_type):
            value = self._create_key(key)
            setattr(obj, key.field_name, value)
            values.append(value)
        return tuple(values)

    def _create_key(self, key: annotation_helper.KeyField) -> Any:
        key_type = annotation_helper.unwrap_optional(key.annotation)
        if key_type is str:
            return str(next(self._id_counter))
        if key_type is int:
            return next(self._id_counter)
        raise DataStoreError(
            f"Automated key generation for type '{key_type}' is not supported "
            f"(caused on field '{self._data_type.__name__}.{key.field_name}')."
        )
