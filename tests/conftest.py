"""Shared test fixtures."""

from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, timedelta

import pytest

from cattle_keeper.config import Settings, parse_image_types
from cattle_keeper.containers import AppContainer
from cattle_keeper.domain.activity import ActivityEntry
from cattle_keeper.domain.cattle import CattleRecord
from cattle_keeper.domain.images import StoredImage
from cattle_keeper.domain.milk import MilkRecord
from cattle_keeper.errors import StorageError
from cattle_keeper.services.activity import ActivityRepository, ActivityService
from cattle_keeper.services.cattle import CattleRepository, CattleService
from cattle_keeper.services.images import ImageService, ImageStore
from cattle_keeper.services.milk import MilkRepository, MilkService
from cattle_keeper.services.reconciliation import AuditCache, AuditEntries

API_KEY = "test-api-key"
START = datetime(2024, 5, 1, 8, 0, tzinfo=UTC)


@dataclass
class FakeClock:
    """Clock that advances one minute per call."""

    now: datetime = START
    step: timedelta = timedelta(minutes=1)

    def __call__(self) -> datetime:
        current = self.now
        self.now = current + self.step
        return current


@dataclass
class InMemoryCattleRepository(CattleRepository):
    """In-memory cattle repository for tests."""

    records: dict[str, CattleRecord] = field(default_factory=dict)
    reachable: bool = True

    def list_cattle(self) -> list[CattleRecord]:
        return sorted(self.records.values(), key=lambda record: record.name)

    def get_cattle(self, cattle_id: str) -> CattleRecord | None:
        return self.records.get(cattle_id)

    def create_cattle(self, record: CattleRecord) -> CattleRecord:
        self.records[record.id] = record
        return record

    def update_cattle(
        self, cattle_id: str, changes: dict[str, object]
    ) -> CattleRecord | None:
        current = self.records.get(cattle_id)
        if current is None:
            return None
        values = {
            name: None if value == "" else value for name, value in changes.items()
        }
        updated = replace(current, **values)
        self.records[cattle_id] = updated
        return updated

    def delete_cattle(self, cattle_id: str) -> bool:
        return self.records.pop(cattle_id, None) is not None

    def ping(self) -> bool:
        if not self.reachable:
            raise StorageError("Cattle store is unreachable")
        return True


@dataclass
class InMemoryMilkRepository(MilkRepository):
    """In-memory milk repository for tests."""

    records: dict[str, MilkRecord] = field(default_factory=dict)

    def list_milk_records(self) -> list[MilkRecord]:
        by_created = sorted(
            self.records.values(), key=lambda record: record.created_at, reverse=True
        )
        return sorted(by_created, key=lambda record: record.date, reverse=True)

    def get_milk_record(self, record_id: str) -> MilkRecord | None:
        return self.records.get(record_id)

    def create_milk_record(self, record: MilkRecord) -> MilkRecord:
        self.records[record.id] = record
        return record

    def delete_milk_record(self, record_id: str) -> bool:
        return self.records.pop(record_id, None) is not None


@dataclass
class InMemoryActivityRepository(ActivityRepository):
    """In-memory activity repository for tests."""

    entries: list[ActivityEntry] = field(default_factory=list)
    fail_writes: bool = False
    loads: int = 0

    def list_activities(self) -> list[ActivityEntry]:
        self.loads += 1
        return sorted(self.entries, key=lambda entry: entry.timestamp, reverse=True)

    def create_activity(self, entry: ActivityEntry) -> ActivityEntry:
        if self.fail_writes:
            raise StorageError("Failed to add activity log")
        self.entries.append(entry)
        return entry


@dataclass
class InMemoryImageStore(ImageStore):
    """In-memory image store for tests."""

    base_url: str = "https://storage.example/cattle-images"
    blobs: dict[str, bytes] = field(default_factory=dict)
    fail_deletes: bool = False

    def upload(self, filename: str, content: bytes, content_type: str) -> str:
        self.blobs[filename] = content
        return f"{self.base_url}/{filename}"

    def delete(self, filename: str) -> bool:
        if self.fail_deletes:
            raise StorageError("Failed to delete image")
        return self.blobs.pop(filename, None) is not None

    def inspect(self, filename: str) -> StoredImage | None:
        if filename not in self.blobs:
            return None
        return StoredImage(
            filename=filename,
            size=len(self.blobs[filename]),
            created=START,
            modified=START,
        )


@dataclass
class InMemoryAuditCache(AuditCache):
    """In-memory audit cache that can simulate read and write failures."""

    namespaces: dict[str, AuditEntries] = field(default_factory=dict)
    fail_reads: bool = False
    fail_writes: bool = False

    def load(self, namespace: str) -> AuditEntries:
        if self.fail_reads:
            raise OSError("cache unreadable")
        return {
            key: dict(value)
            for key, value in self.namespaces.get(namespace, {}).items()
        }

    def save(self, namespace: str, entries: AuditEntries) -> None:
        if self.fail_writes:
            raise OSError("cache unwritable")
        self.namespaces[namespace] = {
            key: dict(value) for key, value in entries.items()
        }

    def update(
        self, namespace: str, mutate: Callable[[AuditEntries], bool]
    ) -> None:
        entries = self.load(namespace)
        if mutate(entries):
            self.save(namespace, entries)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        api_key=API_KEY,
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def image_store() -> InMemoryImageStore:
    return InMemoryImageStore()


@pytest.fixture
def cattle_repository() -> InMemoryCattleRepository:
    return InMemoryCattleRepository()


@pytest.fixture
def activity_repository() -> InMemoryActivityRepository:
    return InMemoryActivityRepository()


@pytest.fixture
def container(
    settings: Settings,
    clock: FakeClock,
    image_store: InMemoryImageStore,
    cattle_repository: InMemoryCattleRepository,
    activity_repository: InMemoryActivityRepository,
) -> AppContainer:
    image_service = ImageService(
        store=image_store,
        max_size=settings.max_image_size,
        allowed_types=parse_image_types(settings.allowed_image_types),
    )
    cattle_service = CattleService(
        cattle_repository,
        deletion_hooks=[image_service.discard_cattle_image],
        clock=clock,
    )

    def prepare_resources() -> None:
        return None

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        cattle_service=cattle_service,
        milk_service=MilkService(InMemoryMilkRepository(), clock=clock),
        activity_service=ActivityService(activity_repository, clock=clock),
        image_service=image_service,
        prepare_resources=prepare_resources,
        close_resources=close_resources,
    )
