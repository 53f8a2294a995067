"""Tests for Supabase adapter implementations."""

from dataclasses import dataclass, field
from datetime import UTC, datetime

import pytest

from cattle_keeper.adapters.supabase_activity_repository import (
    SupabaseActivityRepository,
)
from cattle_keeper.adapters.supabase_cattle_repository import SupabaseCattleRepository
from cattle_keeper.adapters.supabase_image_store import SupabaseImageStore
from cattle_keeper.adapters.supabase_milk_repository import SupabaseMilkRepository
from cattle_keeper.domain.activity import ActivityEntry
from cattle_keeper.domain.cattle import CattleRecord
from cattle_keeper.domain.milk import MilkRecord
from cattle_keeper.errors import StorageError

CREATED = datetime(2024, 5, 1, 8, 0, tzinfo=UTC)


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {"select": [], "insert": [], "update": [], "delete": []}
    )
    last_payload: object | None = None
    last_filters: list[tuple[str, object]] = field(default_factory=list)
    orders: list[tuple[str, bool]] = field(default_factory=list)
    error: Exception | None = None

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, *_args) -> "FakeTable":
        self._action = "select"
        return self

    def insert(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "insert"
        self.last_payload = payload
        return self

    def update(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "update"
        self.last_payload = payload
        return self

    def delete(self) -> "FakeTable":
        self._action = "delete"
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def order(self, column: str, desc: bool = False) -> "FakeTable":
        self.orders.append((column, desc))
        return self

    def execute(self) -> FakeResponse:
        if self.error is not None:
            raise self.error
        action = getattr(self, "_action", "select")
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeBucketApi:
    name: str
    objects: list[dict[str, object]] = field(default_factory=list)
    uploads: list[tuple[str, bytes, dict[str, str]]] = field(default_factory=list)
    removed: list[list[str]] = field(default_factory=list)

    def upload(self, path: str, file: bytes, file_options: dict[str, str]) -> None:
        self.uploads.append((path, file, file_options))

    def get_public_url(self, path: str) -> str:
        return f"https://example.supabase.co/storage/v1/public/{self.name}/{path}"

    def remove(self, paths: list[str]) -> list[dict[str, object]]:
        self.removed.append(paths)
        return [item for item in self.objects if item.get("name") in paths]

    def list(self, path: str, options: dict[str, object]) -> list[dict[str, object]]:
        return self.objects


@dataclass
class FakeBucket:
    name: str


@dataclass
class FakeStorage:
    buckets: dict[str, FakeBucketApi] = field(default_factory=dict)
    created: list[tuple[str, dict[str, object]]] = field(default_factory=list)

    def list_buckets(self) -> list[FakeBucket]:
        return [FakeBucket(name=name) for name in self.buckets]

    def create_bucket(self, name: str, options: dict[str, object]) -> None:
        self.created.append((name, options))
        self.buckets[name] = FakeBucketApi(name=name)

    def from_(self, name: str) -> FakeBucketApi:
        if name not in self.buckets:
            self.buckets[name] = FakeBucketApi(name=name)
        return self.buckets[name]


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)
    storage: FakeStorage = field(default_factory=FakeStorage)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def _cattle_row(**overrides: object) -> dict[str, object]:
    row: dict[str, object] = {
        "id": "c1",
        "name": "Bessie",
        "breed": "Jersey",
        "dateOfBirth": "2021-03-04",
        "sex": "female",
        "createdAt": "2024-05-01T08:00:00+00:00",
    }
    row.update(overrides)
    return row


def test_supabase_cattle_repository_roundtrip() -> None:
    client = FakeSupabaseClient()
    table = client.table("cattle")
    table.queue("insert", [_cattle_row()])
    table.queue("select", [_cattle_row()])

    repository = SupabaseCattleRepository(client)
    created = repository.create_cattle(
        CattleRecord(
            id="c1",
            name="Bessie",
            breed="Jersey",
            date_of_birth="2021-03-04",
            sex="female",
            created_at=CREATED,
        )
    )
    fetched = repository.get_cattle("c1")

    assert isinstance(table.last_payload, dict)
    assert table.last_payload["dateOfBirth"] == "2021-03-04"
    assert "matingBreed" not in table.last_payload
    assert created.created_at == CREATED
    assert fetched is not None
    assert fetched.name == "Bessie"
    assert ("id", "c1") in table.last_filters


def test_supabase_cattle_repository_update_maps_columns() -> None:
    client = FakeSupabaseClient()
    table = client.table("cattle")
    table.queue("update", [_cattle_row(name="X", matingBreed=None)])

    repository = SupabaseCattleRepository(client)
    updated = repository.update_cattle(
        "c1", {"name": "X", "mating_breed": "", "last_edited_at": CREATED}
    )

    assert table.last_payload == {
        "name": "X",
        "matingBreed": None,
        "lastEditedAt": CREATED.isoformat(),
    }
    assert updated is not None
    assert updated.name == "X"


def test_supabase_cattle_repository_missing_rows() -> None:
    client = FakeSupabaseClient()
    repository = SupabaseCattleRepository(client)

    assert repository.get_cattle("nope") is None
    assert repository.update_cattle("nope", {"name": "X"}) is None
    assert repository.delete_cattle("nope") is False


def test_supabase_cattle_repository_wraps_failures() -> None:
    client = FakeSupabaseClient()
    client.table("cattle").error = ConnectionError("down")
    repository = SupabaseCattleRepository(client)

    with pytest.raises(StorageError):
        repository.list_cattle()
    with pytest.raises(StorageError):
        repository.ping()


def test_supabase_cattle_repository_empty_insert_fails() -> None:
    repository = SupabaseCattleRepository(FakeSupabaseClient())

    with pytest.raises(StorageError):
        repository.create_cattle(
            CattleRecord(
                id="c1",
                name="Bessie",
                breed="Jersey",
                date_of_birth="2021-03-04",
                sex="female",
            )
        )


def test_supabase_milk_repository_orders_and_parses() -> None:
    client = FakeSupabaseClient()
    table = client.table("milk_records")
    table.queue(
        "select",
        [
            {
                "id": "m1",
                "cowName": "Bessie",
                "date": "2024-05-01",
                "morningAmount": 3.5,
                "eveningAmount": 4,
                "totalDaily": 7.5,
                "addedBy": "alice",
                "createdAt": "2024-05-01T08:00:00+00:00",
            }
        ],
    )

    repository = SupabaseMilkRepository(client)
    records = repository.list_milk_records()

    assert table.orders == [("date", True), ("createdAt", True)]
    assert records[0].total_daily == 7.5
    assert records[0].added_by == "alice"


def test_supabase_milk_repository_create_and_delete() -> None:
    client = FakeSupabaseClient()
    table = client.table("milk_records")
    record = MilkRecord(
        id="m1",
        cow_name="Bessie",
        date="2024-05-01",
        morning_amount=1.0,
        evening_amount=2.0,
        total_daily=3.0,
        created_at=CREATED,
    )
    table.queue("insert", [record.to_payload()])
    table.queue("delete", [{"id": "m1"}])

    repository = SupabaseMilkRepository(client)

    assert repository.create_milk_record(record) == record
    assert repository.delete_milk_record("m1") is True


def test_supabase_activity_repository() -> None:
    client = FakeSupabaseClient()
    table = client.table("activities")
    entry = ActivityEntry(
        id="a1",
        timestamp=CREATED,
        user="alice",
        action="add",
        category="cattle",
        target="Bessie",
        details='Added female Jersey cattle "Bessie"',
    )
    table.queue("insert", [entry.to_payload()])
    table.queue("select", [entry.to_payload()])

    repository = SupabaseActivityRepository(client)

    assert repository.create_activity(entry) == entry
    assert repository.list_activities() == [entry]
    assert table.orders == [("timestamp", True)]


def test_supabase_image_store_upload_and_delete() -> None:
    client = FakeSupabaseClient()
    store = SupabaseImageStore(client, bucket="cattle-images", max_size=1024)

    url = store.upload("abc.png", b"png-bytes", "image/png")
    bucket = client.storage.from_("cattle-images")
    bucket.objects.append({"name": "abc.png", "metadata": {"size": 9}})

    assert url.endswith("/cattle-images/abc.png")
    assert bucket.uploads == [("abc.png", b"png-bytes", {"content-type": "image/png"})]
    assert store.delete("abc.png") is True
    assert store.delete("other.png") is False


def test_supabase_image_store_inspect() -> None:
    client = FakeSupabaseClient()
    bucket = client.storage.from_("cattle-images")
    bucket.objects.extend(
        [
            {"name": "abc.png.bak", "metadata": {"size": 1}},
            {
                "name": "abc.png",
                "metadata": {"size": 2048},
                "created_at": "2024-05-01T08:00:00Z",
                "updated_at": "2024-05-02T08:00:00Z",
            },
        ]
    )
    store = SupabaseImageStore(client, bucket="cattle-images", max_size=1024)

    image = store.inspect("abc.png")

    assert image is not None
    assert image.size == 2048
    assert image.created == CREATED
    assert store.inspect("missing.png") is None


def test_supabase_image_store_creates_missing_bucket() -> None:
    client = FakeSupabaseClient()
    store = SupabaseImageStore(client, bucket="cattle-images", max_size=1024)

    store.ensure_bucket()
    store.ensure_bucket()

    assert client.storage.created == [
        ("cattle-images", {"public": True, "file_size_limit": 1024})
    ]
