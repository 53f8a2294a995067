"""Tests for container wiring."""

import asyncio

from cattle_keeper.config import parse_image_types
from cattle_keeper.containers import build_container, build_farm_client


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)

    assert container.cattle_service is not None
    assert container.image_service.allowed_types == parse_image_types(None)
    assert container.cattle_service.deletion_hooks == [
        container.image_service.discard_cattle_image
    ]
    asyncio.run(container.close_resources())


def test_build_farm_client_uses_settings(settings, tmp_path) -> None:
    settings.audit_cache_path = str(tmp_path / "audit.json")

    client, close = build_farm_client("alice", settings)

    assert client.user == "alice"
    assert client.cattle_audit.namespace == "cattleAudit"
    assert client.milk_audit.namespace == "milkAudit"
    asyncio.run(close())


def test_parse_image_types() -> None:
    assert parse_image_types(" image/PNG, ,image/jpeg ") == frozenset(
        {"image/png", "image/jpeg"}
    )
    assert "image/webp" in parse_image_types("")
