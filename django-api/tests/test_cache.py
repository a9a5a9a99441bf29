"""Tests for cache behavior.

Run with: pytest tests/test_cache.py -v
"""

import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from scheduling import models as orm
from scheduling.cache_keys import (
    AMPHITHEATERS_KEY,
    DEPARTMENTS_KEY,
    ROOM_LIST_KEY,
    room_detail_key,
)


@pytest.mark.django_db
class TestCacheInvalidation:
    """Tests for cache invalidation on model changes."""

    def test_room_list_served_from_cache(self, api_client: APIClient):
        orm.Room.objects.create(name="S1", capacity=30, department="Informatique")
        api_client.get("/api/rooms")
        cache.set(ROOM_LIST_KEY, [{"name": "cached"}])

        response = api_client.get("/api/rooms")

        assert response.json() == [{"name": "cached"}]

    def test_room_save_invalidates_list_cache(self, api_client: APIClient):
        room = orm.Room.objects.create(name="S1", capacity=30, department="Informatique")
        api_client.get("/api/rooms")
        assert cache.get(ROOM_LIST_KEY) is not None

        room.capacity = 40
        room.save()

        assert cache.get(ROOM_LIST_KEY) is None
        assert api_client.get("/api/rooms").json()[0]["capacity"] == 40

    def test_room_save_invalidates_detail_cache(self, api_client: APIClient):
        room = orm.Room.objects.create(name="S1", capacity=30, department="Informatique")
        api_client.get(f"/api/rooms/{room.id}")
        assert cache.get(room_detail_key(room.id)) is not None

        room.name = "S1 bis"
        room.save()

        assert cache.get(room_detail_key(room.id)) is None

    def test_room_delete_invalidates_amphitheaters_and_departments(self, api_client: APIClient):
        amphi = orm.Room.objects.create(
            name="Amphi", capacity=200, category=orm.Room.Category.AMPHITHEATER
        )
        api_client.get("/api/rooms/amphitheaters")
        api_client.get("/api/rooms/departments")
        assert cache.get(AMPHITHEATERS_KEY) is not None
        assert cache.get(DEPARTMENTS_KEY) is not None

        amphi.delete()

        assert cache.get(AMPHITHEATERS_KEY) is None
        assert cache.get(DEPARTMENTS_KEY) is None
        assert api_client.get("/api/rooms/amphitheaters").json() == []

    def test_detail_cache_keyed_on_canonical_id(self, api_client: APIClient):
        room = orm.Room.objects.create(name="S1", capacity=30, department="Informatique")
        api_client.get(f"/api/rooms/{str(room.id).upper()}")

        room.capacity = 99
        room.save()

        response = api_client.get(f"/api/rooms/{str(room.id).upper()}")
        assert response.json()["capacity"] == 99
