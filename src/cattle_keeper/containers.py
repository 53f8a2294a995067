"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

from supabase import create_client

from cattle_keeper.adapters.cattle_keeper_client import HttpxCattleKeeperClient
from cattle_keeper.adapters.json_audit_cache import JsonFileAuditCache
from cattle_keeper.adapters.supabase_activity_repository import (
    SupabaseActivityRepository,
)
from cattle_keeper.adapters.supabase_cattle_repository import SupabaseCattleRepository
from cattle_keeper.adapters.supabase_image_store import SupabaseImageStore
from cattle_keeper.adapters.supabase_milk_repository import SupabaseMilkRepository
from cattle_keeper.config import Settings, parse_image_types
from cattle_keeper.services.activity import ActivityService
from cattle_keeper.services.cattle import CattleService
from cattle_keeper.services.farm_client import FarmClient
from cattle_keeper.services.images import ImageService
from cattle_keeper.services.milk import MilkService
from cattle_keeper.services.reconciliation import (
    CATTLE_AUDIT_FIELDS,
    MILK_AUDIT_FIELDS,
    AuditReconciler,
)


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    cattle_service: CattleService
    milk_service: MilkService
    activity_service: ActivityService
    image_service: ImageService
    prepare_resources: Callable[[], None]
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    image_store = SupabaseImageStore(
        client=supabase_client,
        bucket=resolved_settings.image_bucket,
        max_size=resolved_settings.max_image_size,
    )
    image_service = ImageService(
        store=image_store,
        max_size=resolved_settings.max_image_size,
        allowed_types=parse_image_types(resolved_settings.allowed_image_types),
    )
    cattle_service = CattleService(
        SupabaseCattleRepository(supabase_client),
        deletion_hooks=[image_service.discard_cattle_image],
    )
    milk_service = MilkService(SupabaseMilkRepository(supabase_client))
    activity_service = ActivityService(SupabaseActivityRepository(supabase_client))

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=resolved_settings,
        cattle_service=cattle_service,
        milk_service=milk_service,
        activity_service=activity_service,
        image_service=image_service,
        prepare_resources=image_store.ensure_bucket,
        close_resources=close_resources,
    )


def build_farm_client(
    user: str, settings: Settings | None = None
) -> tuple[FarmClient, Callable[[], Awaitable[None]]]:
    """Create a farm client and the coroutine that closes its HTTP session."""
    resolved_settings = settings or Settings()
    api = HttpxCattleKeeperClient.create(
        base_url=resolved_settings.api_base_url,
        api_key=resolved_settings.api_key,
        user=user,
    )
    cache = JsonFileAuditCache(Path(resolved_settings.audit_cache_path))
    client = FarmClient(
        api=api,
        cattle_audit=AuditReconciler(cache, "cattleAudit", CATTLE_AUDIT_FIELDS),
        milk_audit=AuditReconciler(cache, "milkAudit", MILK_AUDIT_FIELDS),
        user=user,
    )
    return client, api.close
