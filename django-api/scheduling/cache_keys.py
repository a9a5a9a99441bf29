"""Cache keys for room catalog responses."""

ROOM_LIST_KEY = "rooms:list"
AMPHITHEATERS_KEY = "rooms:amphitheaters"
DEPARTMENTS_KEY = "rooms:departments"


def room_detail_key(room_id) -> str:
    return f"rooms:{room_id}"
