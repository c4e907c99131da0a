"""Conversion between HTTP payloads / key predicates and domain objects."""

import re
from typing import Any

from pydantic import BaseModel, TypeAdapter, ValidationError

import odata_memds.domain.annotation_helper as annotation_helper
from odata_memds.domain.annotations import EdmMediaResourceContent
from odata_memds.errors import EntityValidationError

_NAMED_PREFIX = re.compile(r"\s*\w+\s*=")
# Name=value followed by a comma or the end; quoted values may contain commas and '=' ('' escapes a quote)
_KEY_PAIR = re.compile(r"\s*(\w+)\s*=\s*('(?:[^']|'')*'|\"[^\"]*\"|[^,]*?)\s*(?:,|$)")


def _strip_quotes(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] == "'":
        return value[1:-1].replace("''", "'")
    if len(value) >= 2 and value[0] == value[-1] == '"':
        return value[1:-1]
    return value


def _split_named_keys(predicate: str) -> dict[str, str]:
    raw: dict[str, str] = {}
    pos = 0
    while pos < len(predicate):
        match = _KEY_PAIR.match(predicate, pos)
        if match is None or match.end() == pos:
            raise EntityValidationError(f"Malformed key predicate '{predicate}'")
        raw[match.group(1)] = _strip_quotes(match.group(2))
        pos = match.end()
    return raw

def parse_key_predicate(data_type: type, predicate: str) -> dict[str, Any]:
    """
    Parse a key predicate into key values by EDM property name.

    Accepted forms: a bare value for single-key types (`1`, `'1'`) or
    `Name=value` pairs separated by commas, optionally in parentheses
    (`(Name='Logo',ImageFormat='png')`). Values are converted to the
    type of their key field.

    Raises:
        EntityValidationError: If the predicate does not name exactly the key fields
            or a value cannot be converted
    """
    key_fields = annotation_helper.get_key_fields(data_type)
    predicate = predicate.strip()
    if predicate.startswith("(") and predicate.endswith(")"):
        predicate = predicate[1:-1]

    if _NAMED_PREFIX.match(predicate):
        raw = _split_named_keys(predicate)
    else:
        if len(key_fields) != 1:
            raise EntityValidationError(
                f"Type '{data_type.__name__}' has a composite key; use Name=value pairs"
            )
        raw = {key_fields[0].property_name: _strip_quotes(predicate)}

    expected = {key.property_name for key in key_fields}
    if set(raw) != expected:
        raise EntityValidationError(
            f"Key predicate must name {', '.join(sorted(expected))}, got {', '.join(sorted(raw))}"
        )

    keys: dict[str, Any] = {}
    for key in key_fields:
        try:
            keys[key.property_name] = TypeAdapter(key.annotation).validate_python(raw[key.property_name])
        except ValidationError as e:
            raise EntityValidationError(
                f"Invalid value '{raw[key.property_name]}' for key '{key.property_name}'"
            ) from e
    return keys


def _excluded_fields(data_type: type) -> set[str]:
    # Navigation fields would recurse through back references; media content is served via $value
    return set(annotation_helper.get_navigation_fields(data_type)) | set(
        annotation_helper.get_annotated_fields(data_type, EdmMediaResourceContent)
    )


def to_payload(entity: BaseModel) -> dict[str, Any]:
    return entity.model_dump(mode="json", exclude=_excluded_fields(type(entity)))


def from_payload(data_type: type, payload: dict[str, Any]) -> BaseModel:
    """Build a `data_type` instance from a request body, ignoring navigation fields."""
    navigation = set(annotation_helper.get_navigation_fields(data_type))
    values = {name: value for name, value in payload.items() if name not in navigation}
    try:
        return data_type.model_validate(values)
    except ValidationError as e:
        raise EntityValidationError(str(e)) from e
