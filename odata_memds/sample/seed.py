import logging
from datetime import date

from odata_memds.sample.model import Building, Employee, Manager, Photo, Room, Team
from odata_memds.services.annotation_ds import AnnotationInMemoryDs

logger = logging.getLogger(__name__)


def _assign_room(employee: Employee, room: Room) -> None:
    employee.room = room
    room.employees.append(employee)


def _assign_team(employee: Employee, team: Team) -> None:
    employee.team = team
    team.employees.append(employee)


def seed(data_source: AnnotationInMemoryDs) -> None:
    """Populate the sample entity sets with a small, fully linked data set."""
    buildings = data_source.get_entity_set("Buildings")
    rooms = data_source.get_entity_set("Rooms")
    employees = data_source.get_entity_set("Employees")
    managers = data_source.get_entity_set("Managers")
    teams = data_source.get_entity_set("Teams")
    photos = data_source.get_entity_set("Photos")

    building_1 = Building(name="Building 1")
    building_2 = Building(name="Building 2")
    building_3 = Building(name="Building 3")
    for building in (building_1, building_2, building_3):
        data_source.create_data(buildings, building)

    room_1 = Room(name="Room 1", seats=4, version=1)
    room_2 = Room(name="Room 2", seats=5, version=2)
    room_3 = Room(name="Room 3", seats=2, version=3)
    for room, building in ((room_1, building_1), (room_2, building_2), (room_3, building_2)):
        data_source.create_data(rooms, room)
        room.building = building
        building.rooms.append(room)

    team_1 = Team(name="Team 1", is_scrum_team=False)
    team_2 = Team(name="Team 2", is_scrum_team=True)
    for team in (team_1, team_2):
        data_source.create_data(teams, team)

    manager_1 = Manager(
        employee_name="Walter Winter",
        age=52,
        entry_date=date(1999, 1, 1),
        image_type="image/jpeg",
        image=b"\xff\xd8\xff\xe0walter",
    )
    manager_2 = Manager(employee_name="Jonathan Smith", age=56, entry_date=date(2003, 7, 1))
    for manager, room, team in ((manager_1, room_1, team_1), (manager_2, room_2, team_2)):
        data_source.create_data(managers, manager)
        manager.room = room
        manager.team = team

    staff = [
        (Employee(employee_name="Frederic Fall", age=32, entry_date=date(2003, 7, 1)), manager_1, team_1, room_1),
        (Employee(employee_name="Peter Burke", age=39, entry_date=date(2005, 2, 1)), manager_1, team_1, room_2),
        (Employee(employee_name="John Field", age=42, entry_date=date(2008, 1, 15)), manager_2, team_2, room_2),
        (Employee(employee_name="Maria Hill", age=29, entry_date=date(2010, 6, 1)), manager_2, team_2, room_3),
    ]
    for employee, manager, team, room in staff:
        data_source.create_data(employees, employee)
        employee.manager = manager
        manager.employees.append(employee)
        _assign_team(employee, team)
        _assign_room(employee, room)

    data_source.create_data(
        photos,
        Photo(name="Logo", image_format="png", mime_type="image/png", image=b"\x89PNG\r\n\x1a\nlogo"),
    )
    data_source.create_data(
        photos,
        Photo(name="Logo", image_format="svg", mime_type="image/svg+xml", image=b"<svg/>"),
    )

    logger.info("Seeded sample data for %s", ", ".join(data_source.entity_set_names()))
