from typing import Any

from fastapi import APIRouter, Body, Depends, Request, Response, status

import odata_memds.domain.annotation_helper as annotation_helper
from odata_memds.api.deps import get_data_source
from odata_memds.api.payload import from_payload, parse_key_predicate, to_payload
from odata_memds.domain.annotations import EdmMediaResourceContent, EdmMediaResourceMimeType
from odata_memds.errors import NotFoundError
from odata_memds.schemas.binary import BinaryData
from odata_memds.schemas.edm import EdmEntitySet
from odata_memds.schemas.service import ServiceDocument
from odata_memds.services.annotation_ds import AnnotationInMemoryDs

router = APIRouter(tags=["entity sets"])


def _read_by_predicate(
    data_source: AnnotationInMemoryDs, entity_set: str, key: str
) -> tuple[EdmEntitySet, dict[str, Any], Any]:
    edm_entity_set = data_source.get_entity_set(entity_set)
    keys = parse_key_predicate(data_source.get_data_type(edm_entity_set), key)
    return edm_entity_set, keys, data_source.read_entity(edm_entity_set, keys)


def _navigation_target(
    data_source: AnnotationInMemoryDs, source_set: EdmEntitySet, navigation: str
) -> EdmEntitySet:
    source_type = data_source.get_data_type(source_set)
    field = annotation_helper.find_navigation_field(source_type, navigation)
    if field is None:
        raise NotFoundError(f"Navigation property '{navigation}' not found on entity set '{source_set}'")
    return data_source.entity_set_for(annotation_helper.get_navigation_target(source_type, field))


@router.get("/", response_model=ServiceDocument)
def get_service_document(data_source: AnnotationInMemoryDs = Depends(get_data_source)):
    """
    List the entity sets served by the data source.
    """
    return ServiceDocument(entity_sets=data_source.entity_set_names())


@router.get("/{entity_set}")
def read_entity_set(entity_set: str, data_source: AnnotationInMemoryDs = Depends(get_data_source)):
    edm_entity_set = data_source.get_entity_set(entity_set)
    return [to_payload(entity) for entity in data_source.read_data(edm_entity_set)]


@router.post("/{entity_set}", status_code=status.HTTP_201_CREATED)
def create_entity(
    entity_set: str,
    payload: dict[str, Any] = Body(...),
    data_source: AnnotationInMemoryDs = Depends(get_data_source),
):
    """
    Create an entity. Missing or already taken keys are generated by the store.
    """
    edm_entity_set = data_source.get_entity_set(entity_set)
    entity = from_payload(data_source.get_data_type(edm_entity_set), payload)
    data_source.create_data(edm_entity_set, entity)
    return to_payload(entity)


@router.get("/{entity_set}/{key}")
def read_entity(entity_set: str, key: str, data_source: AnnotationInMemoryDs = Depends(get_data_source)):
    _, _, entity = _read_by_predicate(data_source, entity_set, key)
    return to_payload(entity)


@router.put("/{entity_set}/{key}")
def update_entity(
    entity_set: str,
    key: str,
    payload: dict[str, Any] = Body(...),
    data_source: AnnotationInMemoryDs = Depends(get_data_source),
):
    """
    Replace an entity. The keys in the path win over keys in the body.

    Navigation links are carried over from the stored entity, and so are the
    media resource fields unless the body provides them.
    """
    edm_entity_set, keys, existing = _read_by_predicate(data_source, entity_set, key)
    data_type = data_source.get_data_type(edm_entity_set)

    entity = from_payload(data_type, payload)
    annotation_helper.set_key_fields(entity, keys)
    for field in annotation_helper.get_navigation_fields(data_type):
        setattr(entity, field, getattr(existing, field))
    media_fields = annotation_helper.get_annotated_fields(
        data_type, EdmMediaResourceContent
    ) + annotation_helper.get_annotated_fields(data_type, EdmMediaResourceMimeType)
    for field in media_fields:
        if field not in entity.model_fields_set:
            setattr(entity, field, getattr(existing, field))

    return to_payload(data_source.update_data(edm_entity_set, entity))


@router.delete("/{entity_set}/{key}", status_code=status.HTTP_204_NO_CONTENT)
def delete_entity(entity_set: str, key: str, data_source: AnnotationInMemoryDs = Depends(get_data_source)):
    edm_entity_set, keys, _ = _read_by_predicate(data_source, entity_set, key)
    data_source.delete_data(edm_entity_set, keys)


@router.get("/{entity_set}/{key}/$value")
def read_media_resource(
    entity_set: str, key: str, data_source: AnnotationInMemoryDs = Depends(get_data_source)
):
    edm_entity_set, _, entity = _read_by_predicate(data_source, entity_set, key)
    binary = data_source.read_binary_data(edm_entity_set, entity)
    if binary.data is None:
        raise NotFoundError(f"No media resource for entity in entity set '{edm_entity_set}'")
    return Response(content=binary.data, media_type=binary.mime_type or "application/octet-stream")


@router.put("/{entity_set}/{key}/$value", status_code=status.HTTP_204_NO_CONTENT)
async def write_media_resource(
    entity_set: str,
    key: str,
    request: Request,
    data_source: AnnotationInMemoryDs = Depends(get_data_source),
):
    edm_entity_set, _, entity = _read_by_predicate(data_source, entity_set, key)
    binary = BinaryData(data=await request.body(), mime_type=request.headers.get("content-type"))
    data_source.write_binary_data(edm_entity_set, entity, binary)


@router.put("/{entity_set}/{key}/$links/{navigation}", status_code=status.HTTP_204_NO_CONTENT)
def write_link(
    entity_set: str,
    key: str,
    navigation: str,
    payload: dict[str, Any] | None = Body(default=None),
    data_source: AnnotationInMemoryDs = Depends(get_data_source),
):
    edm_entity_set, _, entity = _read_by_predicate(data_source, entity_set, key)
    target_set = _navigation_target(data_source, edm_entity_set, navigation)
    data_source.write_relation(edm_entity_set, entity, target_set, payload or {})


@router.delete("/{entity_set}/{key}/$links/{navigation}", status_code=status.HTTP_204_NO_CONTENT)
def delete_link(
    entity_set: str,
    key: str,
    navigation: str,
    data_source: AnnotationInMemoryDs = Depends(get_data_source),
):
    edm_entity_set, _, entity = _read_by_predicate(data_source, entity_set, key)
    target_set = _navigation_target(data_source, edm_entity_set, navigation)
    data_source.delete_relation(edm_entity_set, entity, target_set, {})


def _read_related(
    data_source: AnnotationInMemoryDs,
    entity_set: str,
    key: str,
    navigation: str,
    target_key: str | None,
):
    edm_entity_set, _, source = _read_by_predicate(data_source, entity_set, key)
    target_set = _navigation_target(data_source, edm_entity_set, navigation)
    target_keys = (
        parse_key_predicate(data_source.get_data_type(target_set), target_key) if target_key else {}
    )

    result = data_source.read_related_data(edm_entity_set, source, target_set, target_keys)
    if isinstance(result, list):
        return [to_payload(entity) for entity in result]
    if result is None:
        raise NotFoundError(f"No related entity for navigation '{navigation}'")
    return to_payload(result)


@router.get("/{entity_set}/{key}/{navigation}")
def read_related(
    entity_set: str,
    key: str,
    navigation: str,
    data_source: AnnotationInMemoryDs = Depends(get_data_source),
):
    """
    Read the entities reachable through a navigation property.

    To-many navigations return a list, to-one navigations a single entity.
    """
    return _read_related(data_source, entity_set, key, navigation, None)


@router.get("/{entity_set}/{key}/{navigation}/{target_key}")
def read_related_entity(
    entity_set: str,
    key: str,
    navigation: str,
    target_key: str,
    data_source: AnnotationInMemoryDs = Depends(get_data_source),
):
    return _read_related(data_source, entity_set, key, navigation, target_key)
