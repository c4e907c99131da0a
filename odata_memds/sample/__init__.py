"""Sample entity model served when no other ENTITY_PACKAGE is configured."""

from odata_memds.sample.model import Building, Employee, Manager, Photo, Room, Team
from odata_memds.sample.seed import seed

__all__ = ["Building", "Employee", "Manager", "Photo", "Room", "Team", "seed"]
