"""Reflection over annotated domain classes.

Everything the data source knows about a domain class (entity set name, key
fields, navigation properties, media resource fields) is read here from the
markers in ``odata_memds.domain.annotations`` and pydantic's ``model_fields``.
"""

from __future__ import annotations

import types
from collections.abc import Collection, Mapping
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Union, get_args, get_origin

from pydantic import BaseModel, PydanticUndefinedAnnotation
from pydantic.fields import FieldInfo

from odata_memds.domain.annotations import (
    ENTITY_SET_ATTR,
    EdmKey,
    EdmNavigationProperty,
    EdmProperty,
    Multiplicity,
)
from odata_memds.errors import AnnotationRuntimeError, ODataRuntimeError


@dataclass(frozen=True, slots=True)
class KeyField:
    field_name: str
    property_name: str
    annotation: Any


@dataclass(frozen=True, slots=True)
class NavigationInfo:
    """Both ends of a navigation between two entity types.

    `from_multiplicity` is the multiplicity of the `from_field` navigation,
    i.e. how many `to_type` instances one `from_type` instance links to.
    `to_field` and `to_multiplicity` are None when the target type declares
    no matching navigation back to the source (uni-directional relation).
    """

    from_type: type
    from_field: str
    from_multiplicity: Multiplicity
    to_type: type
    to_field: str | None
    to_multiplicity: Multiplicity | None


# ---------------------------------------------------------------------------
# Fields
# ---------------------------------------------------------------------------


def _model_fields(cls: type) -> dict[str, FieldInfo]:
    if not (isinstance(cls, type) and issubclass(cls, BaseModel)):
        raise AnnotationRuntimeError(f"Class '{getattr(cls, '__name__', cls)}' is not a pydantic model.")
    if not cls.__pydantic_complete__:
        # Forward references between entity types are resolved lazily
        try:
            cls.model_rebuild()
        except PydanticUndefinedAnnotation as e:
            raise AnnotationRuntimeError(
                f"Unable to resolve field types of '{cls.__name__}': {e}"
            ) from e
    return cls.model_fields


def _marker(info: FieldInfo, marker_type: type) -> Any | None:
    for item in info.metadata:
        if isinstance(item, marker_type):
            return item
    return None


def get_annotated_fields(cls: type, marker_type: type) -> list[str]:
    """Names of the fields of `cls` carrying a `marker_type` marker, in declaration order."""
    return [name for name, info in _model_fields(cls).items() if _marker(info, marker_type) is not None]


def get_property_name(cls: type, field_name: str) -> str:
    info = _model_fields(cls)[field_name]
    prop = _marker(info, EdmProperty)
    if prop is not None and prop.name:
        return prop.name
    return field_name


def get_field_value(instance: Any, field_name: str) -> Any:
    try:
        return getattr(instance, field_name)
    except AttributeError as e:
        raise ODataRuntimeError(
            f"Error for getting value of field '{field_name}' at instance of '{type(instance).__name__}'."
        ) from e


def get_value_for_field(instance: Any, marker_type: type) -> Any:
    """Value of the first field of `instance` marked with `marker_type`, or None if no field is."""
    fields = get_annotated_fields(type(instance), marker_type)
    if not fields:
        return None
    return get_field_value(instance, fields[0])


# ---------------------------------------------------------------------------
# Entity sets and keys
# ---------------------------------------------------------------------------


def is_entity_set(cls: type) -> bool:
    # Checked on the class itself so undecorated subclasses are not picked up
    return isinstance(cls, type) and ENTITY_SET_ATTR in vars(cls)


def get_entity_set_name(cls: type) -> str:
    if not is_entity_set(cls):
        raise AnnotationRuntimeError(f"Class '{cls.__name__}' is not annotated with @entity_set.")
    return vars(cls)[ENTITY_SET_ATTR].name


@lru_cache(maxsize=None)
def get_key_fields(cls: type) -> tuple[KeyField, ...]:
    fields = _model_fields(cls)
    return tuple(
        KeyField(
            field_name=name,
            property_name=get_property_name(cls, name),
            annotation=fields[name].annotation,
        )
        for name in get_annotated_fields(cls, EdmKey)
    )


def get_key_values(instance: Any) -> dict[str, Any]:
    """Key values of `instance` by EDM property name."""
    return {
        key.property_name: get_field_value(instance, key.field_name)
        for key in get_key_fields(type(instance))
    }


def set_key_fields(instance: Any, keys: Mapping[str, Any]) -> None:
    """Copy the values in `keys` (by EDM property name) onto the key fields of `instance`."""
    for key in get_key_fields(type(instance)):
        setattr(instance, key.field_name, keys.get(key.property_name))


def _key_values_match(first: Mapping[str, Any], second: Mapping[str, Any]) -> bool:
    if len(first) != len(second):
        return False
    if not first:
        raise AnnotationRuntimeError("No keys given for key value matching.")
    return all(value == second.get(name) for name, value in first.items())


def key_match(first: Any, second: Any) -> bool:
    """True if both instances are of the same class and have equal key values."""
    if first is None or second is None:
        return False
    if type(first) is not type(second):
        return False

    first_keys = get_key_values(first)
    second_keys = get_key_values(second)
    if not first_keys and not second_keys:
        raise AnnotationRuntimeError(
            f"Both object instances do not have EdmKey fields defined "
            f"[firstClass={type(first).__name__} secondClass={type(second).__name__}]."
        )
    return _key_values_match(first_keys, second_keys)


def key_match_values(instance: Any, keys: Mapping[str, Any]) -> bool:
    """True if the key values of `instance` equal `keys` (by EDM property name)."""
    return _key_values_match(get_key_values(instance), keys)


# ---------------------------------------------------------------------------
# Navigation
# ---------------------------------------------------------------------------


def unwrap_optional(tp: Any) -> Any:
    if get_origin(tp) in (Union, types.UnionType):
        args = [a for a in get_args(tp) if a is not type(None)]
        if len(args) == 1:
            return unwrap_optional(args[0])
    return tp


def _is_collection_origin(origin: Any) -> bool:
    return (
        isinstance(origin, type)
        and issubclass(origin, Collection)
        and not issubclass(origin, (str, bytes, bytearray, Mapping))
    )


def _element_type(tp: Any) -> tuple[Any, bool]:
    """(element type, is collection) of a navigation field annotation."""
    tp = unwrap_optional(tp)
    origin = get_origin(tp)
    if _is_collection_origin(origin):
        args = get_args(tp)
        if args:
            return unwrap_optional(args[0]), True
    return tp, False


def get_navigation_fields(cls: type) -> list[str]:
    return get_annotated_fields(cls, EdmNavigationProperty)


def get_navigation_property(cls: type, field_name: str) -> EdmNavigationProperty:
    nav = _marker(_model_fields(cls)[field_name], EdmNavigationProperty)
    if nav is None:
        raise AnnotationRuntimeError(f"Field '{cls.__name__}.{field_name}' is not a navigation property.")
    return nav


def get_navigation_target(cls: type, field_name: str) -> type:
    target, _ = _element_type(_model_fields(cls)[field_name].annotation)
    if not isinstance(target, type):
        raise AnnotationRuntimeError(
            f"Unable to determine target type of navigation '{cls.__name__}.{field_name}'."
        )
    return target


def get_navigation_multiplicity(cls: type, field_name: str) -> Multiplicity:
    nav = get_navigation_property(cls, field_name)
    if nav.to_multiplicity is not None:
        return nav.to_multiplicity
    _, is_collection = _element_type(_model_fields(cls)[field_name].annotation)
    return Multiplicity.MANY if is_collection else Multiplicity.ONE


def get_navigation_name(cls: type, field_name: str) -> str:
    return get_navigation_property(cls, field_name).name or field_name


def find_navigation_field(cls: type, name: str) -> str | None:
    """Field of `cls` whose navigation property is called `name`."""
    for field_name in get_navigation_fields(cls):
        if get_navigation_name(cls, field_name) == name:
            return field_name
    return None


def get_association_name(cls: type, field_name: str) -> str:
    nav = get_navigation_property(cls, field_name)
    if nav.association:
        return nav.association
    target = get_navigation_target(cls, field_name)
    return "_".join(sorted((cls.__name__, target.__name__)))


def get_common_navigation_info(source_cls: type, target_cls: type) -> NavigationInfo | None:
    """
    Find the navigation leading from `source_cls` to `target_cls`.

    - Self-referencing types use the first navigation field pointing at the type itself.
    - Otherwise a pair of fields pointing at each other with the same association
      name is preferred.
    - Failing that, the first source field pointing at `target_cls` is used
      as a uni-directional navigation.

    Returns None if `source_cls` has no navigation to `target_cls`.
    """
    source_fields = [
        f for f in get_navigation_fields(source_cls) if get_navigation_target(source_cls, f) is target_cls
    ]
    if not source_fields:
        return None

    if source_cls is target_cls:
        field = source_fields[0]
        return _navigation_info(source_cls, field, target_cls, field)

    target_fields = [
        f for f in get_navigation_fields(target_cls) if get_navigation_target(target_cls, f) is source_cls
    ]
    for source_field in source_fields:
        association = get_association_name(source_cls, source_field)
        for target_field in target_fields:
            if get_association_name(target_cls, target_field) == association:
                return _navigation_info(source_cls, source_field, target_cls, target_field)

    return _navigation_info(source_cls, source_fields[0], target_cls, None)


def _navigation_info(
    source_cls: type, source_field: str, target_cls: type, target_field: str | None
) -> NavigationInfo:
    return NavigationInfo(
        from_type=source_cls,
        from_field=source_field,
        from_multiplicity=get_navigation_multiplicity(source_cls, source_field),
        to_type=target_cls,
        to_field=target_field,
        to_multiplicity=(
            get_navigation_multiplicity(target_cls, target_field) if target_field is not None else None
        ),
    )
