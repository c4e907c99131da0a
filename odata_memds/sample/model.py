"""Reference model: buildings with rooms, employees with managers and teams, photos."""

from datetime import date
from typing import Annotated

from pydantic import BaseModel, Field

from odata_memds.domain.annotations import (
    EdmKey,
    EdmMediaResourceContent,
    EdmMediaResourceMimeType,
    EdmNavigationProperty,
    EdmProperty,
    entity_set,
)


@entity_set(name="Buildings")
class Building(BaseModel):
    id: Annotated[str | None, EdmKey()] = None
    name: str | None = None
    image: Annotated[bytes | None, EdmMediaResourceContent()] = None
    rooms: Annotated["list[Room]", EdmNavigationProperty(name="Rooms", association="BuildingRooms")] = Field(
        default_factory=list
    )


@entity_set(name="Rooms")
class Room(BaseModel):
    id: Annotated[str | None, EdmKey()] = None
    name: str | None = None
    seats: int | None = None
    version: int | None = None
    building: Annotated["Building | None", EdmNavigationProperty(name="Building", association="BuildingRooms")] = None
    employees: Annotated[
        "list[Employee]", EdmNavigationProperty(name="Employees", association="RoomEmployees")
    ] = Field(default_factory=list)


@entity_set(name="Employees")
class Employee(BaseModel):
    employee_id: Annotated[str | None, EdmKey(), EdmProperty(name="EmployeeId")] = None
    employee_name: str | None = None
    age: int | None = None
    entry_date: date | None = None
    image_type: Annotated[str | None, EdmMediaResourceMimeType()] = None
    image: Annotated[bytes | None, EdmMediaResourceContent()] = None
    manager: Annotated["Manager | None", EdmNavigationProperty(name="Manager", association="ManagerEmployees")] = None
    team: Annotated["Team | None", EdmNavigationProperty(name="Team", association="TeamEmployees")] = None
    room: Annotated["Room | None", EdmNavigationProperty(name="Room", association="RoomEmployees")] = None


@entity_set(name="Managers")
class Manager(Employee):
    employees: Annotated[
        list[Employee], EdmNavigationProperty(name="Employees", association="ManagerEmployees")
    ] = Field(default_factory=list)


@entity_set(name="Teams")
class Team(BaseModel):
    id: Annotated[str | None, EdmKey()] = None
    name: str | None = None
    is_scrum_team: bool | None = None
    employees: Annotated[
        list[Employee], EdmNavigationProperty(name="Employees", association="TeamEmployees")
    ] = Field(default_factory=list)


@entity_set(name="Photos")
class Photo(BaseModel):
    name: Annotated[str, EdmKey(), EdmProperty(name="Name")]
    image_format: Annotated[str, EdmKey(), EdmProperty(name="ImageFormat")]
    mime_type: Annotated[str | None, EdmMediaResourceMimeType()] = None
    image: Annotated[bytes | None, EdmMediaResourceContent()] = None


for _model in (Building, Room, Employee, Manager, Team, Photo):
    _model.model_rebuild()
