"""Room catalog service: read-only access to classrooms and amphitheaters."""

from collections.abc import Iterable

from scheduling.domain import Room, RoomCategory
from scheduling.domain.errors import RoomNotFoundError
from scheduling.services.parsing import parse_room_id, parse_room_ids
from scheduling.stores.interfaces import RoomCatalogStore


class RoomCatalogService:
    """Service for room catalog operations."""

    def __init__(self, store: RoomCatalogStore) -> None:
        self._store = store

    def list_rooms(
        self, department: str | None = None, category: RoomCategory | None = None
    ) -> list[Room]:
        return self._store.list_rooms(department=department, category=category)

    def list_by_department(self, department: str) -> list[Room]:
        """Return every room owned by a department, amphitheaters included."""
        return self._store.list_rooms(department=department)

    def list_amphitheaters(self) -> list[Room]:
        return self._store.list_rooms(category=RoomCategory.AMPHITHEATER)

    def list_departments(self) -> list[str]:
        return self._store.list_departments()

    def get_room(self, room_id: str) -> Room:
        """Return a room by ID.

        Raises:
            InvalidIdError: If room_id is not a valid UUID.
            RoomNotFoundError: If the room does not exist.
        """
        room = self._store.get_room(parse_room_id(room_id))
        if room is None:
            raise RoomNotFoundError(room_id)
        return room

    def get_rooms(self, room_ids: Iterable[str]) -> list[Room]:
        """Return rooms in the order requested.

        Raises:
            InvalidIdError: If any id is not a valid UUID.
            RoomNotFoundError: Naming the first id that does not exist.
        """
        ids = parse_room_ids(room_ids)
        found = {room.id: room for room in self._store.get_rooms(ids)}
        for room_id in ids:
            if room_id not in found:
                raise RoomNotFoundError(str(room_id))
        return [found[room_id] for room_id in dict.fromkeys(ids)]
