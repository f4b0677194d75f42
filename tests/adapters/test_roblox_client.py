from __future__ import annotations

import json
from collections.abc import Callable  # noqa: TC003
from typing import TYPE_CHECKING

import httpx
import pytest

from rbxsync.adapters.http_resilience import ResilientClient
from rbxsync.adapters.roblox import RobloxAPIError, RobloxClient, content_type_for
from rbxsync.config import CreatorConfig, ResilienceConfig
from rbxsync.config.roblox import RobloxConfig, build_roblox_resilience
from rbxsync.domain import (
    AssetNotFoundError,
    CompletedOperation,
    Ledger,
    LedgerEntry,
    ParseError,
    PaymentSource,
    PendingOperation,
    RemoteError,
    ResourceCategory,
    ResourceFields,
    SyncAction,
    SyncProject,
    UniverseSettings,
    UploadFailedError,
    run_sync,
)
from rbxsync.domain.ports import RemotePlatform
from tests.helpers.remote import InMemoryLedgerStore, declared

if TYPE_CHECKING:
    from pathlib import Path


def _make_client_factory(
    handler: Callable[[httpx.Request], httpx.Response],
) -> Callable[[ResilienceConfig], ResilientClient]:
    async def async_handler(request: httpx.Request) -> httpx.Response:
        return handler(request)

    def factory(resilience: ResilienceConfig) -> ResilientClient:
        client = ResilientClient(resilience)
        client._client = httpx.AsyncClient(  # noqa: SLF001  # type: ignore[reportPrivateUsage]
            base_url=resilience.base_url or "",
            headers=dict(resilience.default_headers or {}),
            transport=httpx.MockTransport(async_handler),
        )
        return client

    return factory


def _client(
    handler: Callable[[httpx.Request], httpx.Response],
    *,
    creator: CreatorConfig | None = None,
) -> RobloxClient:
    config = RobloxConfig(
        api_key="secret",
        universe_id=42,
        resilience=build_roblox_resilience("secret"),
    )
    return RobloxClient(
        config=config, creator=creator, client_factory=_make_client_factory(handler)
    )


def _form(request: httpx.Request) -> dict[str, str]:
    """Decode simple multipart form fields from a recorded request."""

    content_type = request.headers["content-type"]
    boundary = content_type.split("boundary=")[1]
    fields: dict[str, str] = {}
    for part in request.content.split(f"--{boundary}".encode()):
        if b"Content-Disposition" not in part:
            continue
        head, _, body = part.partition(b"\r\n\r\n")
        name = head.split(b'name="')[1].split(b'"')[0].decode()
        fields[name] = body.rstrip(b"\r\n").decode(errors="replace")
    return fields


def test_list_game_passes_sends_key_and_parses_page() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(
            200,
            json={
                "gamePasses": [
                    {"gamePassId": 11, "name": "VIP", "price": 100, "isForSale": True},
                    {"id": 12, "name": "Speed", "priceInformation": {"defaultPriceInRobux": 50}},
                ],
                "nextPageCursor": "abc",
            },
        )

    with _client(handler) as client:
        page = client.list_resources(ResourceCategory.GAME_PASS, 42, cursor="prev")

    (request,) = requests
    assert request.url.path == "/game-passes/v1/universes/42/game-passes"
    assert request.url.params["limit"] == "100"
    assert request.url.params["cursor"] == "prev"
    assert request.headers["x-api-key"] == "secret"
    assert [(item.identifier, item.name, item.price) for item in page.items] == [
        (11, "VIP", 100),
        (12, "Speed", 50),
    ]
    assert page.items[0].enabled is True
    assert page.next_cursor == "abc"


def test_list_developer_products_uses_page_token() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(
            200,
            json={"developerProducts": [{"productId": 7, "name": "Coins"}], "nextPageToken": ""},
        )

    with _client(handler) as client:
        page = client.list_resources(ResourceCategory.DEVELOPER_PRODUCT, 42, cursor="tok")

    (request,) = requests
    assert request.url.path == "/developer-products/v2/universes/42/developer-products/creator"
    assert request.url.params["pageSize"] == "50"
    assert request.url.params["pageToken"] == "tok"
    assert page.next_cursor is None
    assert page.items[0].identifier == 7


def test_list_badges_targets_badges_host() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"data": [{"id": 3, "name": "Explorer", "enabled": True}]})

    with _client(handler) as client:
        page = client.list_resources(ResourceCategory.BADGE, 42)

    (request,) = requests
    assert request.url.host == "badges.roblox.com"
    assert request.url.path == "/v1/universes/42/badges"
    assert "cursor" not in request.url.params
    assert page.items[0].name == "Explorer"


def test_create_game_pass_sends_multipart_fields() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"gamePassId": 555})

    fields = ResourceFields(name="VIP", price=100, enabled=True, icon_asset_id=9)
    with _client(handler) as client:
        identifier = client.create_resource(ResourceCategory.GAME_PASS, 42, fields)

    (request,) = requests
    assert identifier == 555
    assert request.method == "POST"
    assert _form(request) == {
        "name": "VIP",
        "description": "",
        "price": "100",
        "isForSale": "true",
        "iconAssetId": "9",
    }


def test_create_badge_sends_payment_source_and_icon_image() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"id": 77})

    fields = ResourceFields(
        name="Explorer",
        description="Found it",
        enabled=True,
        icon_asset_id=123,
        payment_source=PaymentSource.GROUP,
    )
    with _client(handler) as client:
        client.create_resource(ResourceCategory.BADGE, 42, fields)

    (request,) = requests
    assert request.url.path == "/legacy-badges/v1/universes/42/badges"
    assert _form(request) == {
        "name": "Explorer",
        "description": "Found it",
        "enabled": "true",
        "iconImageId": "123",
        "paymentSourceType": "2",
    }


def test_update_badge_sends_json_and_accepts_empty_body() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200)

    fields = ResourceFields(name="Explorer", enabled=False, payment_source=PaymentSource.USER)
    with _client(handler) as client:
        client.update_resource(ResourceCategory.BADGE, 42, 77, fields)

    (request,) = requests
    assert request.method == "PATCH"
    assert request.url.path == "/legacy-badges/v1/badges/77"
    assert json.loads(request.content) == {"name": "Explorer", "enabled": False}


def test_update_developer_product_uses_multipart() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(204)

    with _client(handler) as client:
        client.update_resource(
            ResourceCategory.DEVELOPER_PRODUCT, 42, 8, ResourceFields(name="Coins", price=5)
        )

    (request,) = requests
    assert request.url.path == "/developer-products/v2/universes/42/developer-products/8"
    assert _form(request) == {"name": "Coins", "price": "5"}


def test_error_status_raises_api_error_with_body() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(403, text="forbidden")

    with _client(handler) as client, pytest.raises(RobloxAPIError) as excinfo:
        client.list_resources(ResourceCategory.GAME_PASS, 42)

    assert isinstance(excinfo.value, RemoteError)
    assert excinfo.value.status_code == 403
    assert excinfo.value.body == "forbidden"


def test_transport_error_raises_api_error_without_status() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with _client(handler) as client, pytest.raises(RobloxAPIError, match="ReadTimeout") as excinfo:
        client.update_resource(ResourceCategory.GAME_PASS, 42, 7, ResourceFields(name="VIP"))

    assert isinstance(excinfo.value, RemoteError)
    assert excinfo.value.status_code is None


def test_unexpected_payload_raises_parse_error() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"data": [{"name": "No id"}]})

    with _client(handler) as client, pytest.raises(ParseError):
        client.list_resources(ResourceCategory.GAME_PASS, 42)


def test_non_json_payload_raises_parse_error() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>")

    with _client(handler) as client, pytest.raises(ParseError):
        client.create_resource(ResourceCategory.GAME_PASS, 42, ResourceFields(name="VIP"))


def test_upload_asset_returns_pending_operation(tmp_path: Path) -> None:
    icon = tmp_path / "vip.png"
    icon.write_bytes(b"png-bytes")
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"path": "operations/abc", "done": False})

    creator = CreatorConfig(kind="group", id="99")
    with _client(handler, creator=creator) as client:
        operation = client.upload_asset(icon, "vip")

    assert operation == PendingOperation(handle="operations/abc")
    (request,) = requests
    assert request.url.path == "/assets/v1/assets"
    form = _form(request)
    assert json.loads(form["request"]) == {
        "assetType": "Image",
        "displayName": "vip",
        "description": "Uploaded by rbxsync from vip.png",
        "creationContext": {"creator": {"groupId": "99"}},
    }
    assert form["fileContent"] == "png-bytes"
    assert b"Content-Type: image/png" in request.content


def test_upload_asset_completed_immediately(tmp_path: Path) -> None:
    icon = tmp_path / "vip.jpg"
    icon.write_bytes(b"jpg")

    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200, json={"path": "operations/x", "done": True, "response": {"assetId": "321"}}
        )

    with _client(handler, creator=CreatorConfig(kind="user", id="1")) as client:
        assert client.upload_asset(icon, "vip") == CompletedOperation(asset_id=321)


def test_upload_asset_done_without_asset_id_raises(tmp_path: Path) -> None:
    icon = tmp_path / "vip.png"
    icon.write_bytes(b"png")

    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"done": True})

    with (
        _client(handler, creator=CreatorConfig(kind="user", id="1")) as client,
        pytest.raises(UploadFailedError, match="no identifier returned"),
    ):
        client.upload_asset(icon, "vip")


def test_upload_asset_error_payload_raises(tmp_path: Path) -> None:
    icon = tmp_path / "vip.png"
    icon.write_bytes(b"png")

    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"done": True, "error": {"message": "moderated"}})

    with (
        _client(handler, creator=CreatorConfig(kind="user", id="1")) as client,
        pytest.raises(UploadFailedError, match="moderated"),
    ):
        client.upload_asset(icon, "vip")


def test_upload_asset_requires_creator_and_file(tmp_path: Path) -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    with _client(handler) as client, pytest.raises(UploadFailedError):
        client.upload_asset(tmp_path / "vip.png", "vip")

    with (
        _client(handler, creator=CreatorConfig(kind="user", id="1")) as client,
        pytest.raises(AssetNotFoundError),
    ):
        client.upload_asset(tmp_path / "vip.png", "vip")


def test_poll_operation_maps_status() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"done": True, "response": {"assetId": 88}})

    with _client(handler) as client:
        status = client.poll_operation("operations/abc")

    assert requests[0].url.path == "/assets/v1/operations/abc"
    assert status.done
    assert status.asset_id == 88
    assert status.error is None


def test_update_universe_settings_sends_declared_fields() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={})

    settings = UniverseSettings(name="My Game", playable_devices=("computer", "phone"))
    with _client(handler) as client:
        client.update_universe_settings(42, settings)

    (request,) = requests
    assert request.method == "PATCH"
    assert request.url.path == "/cloud/v2/universes/42"
    assert json.loads(request.content) == {
        "name": "My Game",
        "playableDevices": ["computer", "phone"],
    }


def test_publish_place_posts_binary(tmp_path: Path) -> None:
    place = tmp_path / "game.rbxl"
    place.write_bytes(b"\x00place")
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"versionNumber": 12})

    with _client(handler) as client:
        version = client.publish_place(42, 7, place)

    (request,) = requests
    assert version == 12
    assert request.url.path == "/universes/v1/42/places/7/versions"
    assert request.url.params["versionType"] == "Published"
    assert request.headers["content-type"] == "application/octet-stream"
    assert request.content == b"\x00place"


def test_one_http_client_serves_every_call() -> None:
    created: list[ResilientClient] = []
    inner = _make_client_factory(lambda _: httpx.Response(200, json={"data": []}))

    def factory(resilience: ResilienceConfig) -> ResilientClient:
        client = inner(resilience)
        created.append(client)
        return client

    config = RobloxConfig(
        api_key="secret", universe_id=42, resilience=build_roblox_resilience("secret")
    )
    with RobloxClient(config=config, client_factory=factory) as client:
        client.list_resources(ResourceCategory.GAME_PASS, 42)
        client.list_resources(ResourceCategory.BADGE, 42)

    assert len(created) == 1


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("a.png", "image/png"),
        ("b.JPEG", "image/jpeg"),
        ("c.bmp", "image/bmp"),
        ("d.gif", "image/png"),
    ],
)
def test_content_type_for_extension(tmp_path: Path, name: str, expected: str) -> None:
    assert content_type_for(tmp_path / name) == expected


def test_client_satisfies_remote_platform_port() -> None:
    config = RobloxConfig(
        api_key="secret", universe_id=42, resilience=build_roblox_resilience("secret")
    )

    assert isinstance(RobloxClient(config=config), RemotePlatform)


def test_transport_error_fails_one_resource_and_sync_continues() -> None:
    ledger = Ledger()
    ledger.upsert(ResourceCategory.GAME_PASS, 1, LedgerEntry(name="A"))
    ledger.upsert(ResourceCategory.GAME_PASS, 2, LedgerEntry(name="B"))
    store = InMemoryLedgerStore(ledger)
    project = SyncProject(
        resources=(
            declared(ResourceCategory.GAME_PASS, "A", price=10),
            declared(ResourceCategory.GAME_PASS, "B", price=20),
        )
    )
    patched: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "GET":
            return httpx.Response(200, json={"gamePasses": []})
        if request.url.path.endswith("/game-passes/1"):
            raise httpx.ReadTimeout("timed out", request=request)
        patched.append(request.url.path)
        return httpx.Response(200)

    with _client(handler) as client:
        report = run_sync(project, remote=client, store=store, universe_id=42)

    outcomes = {outcome.name: outcome for outcome in report.outcomes}
    assert outcomes["A"].failed
    assert outcomes["A"].error is not None
    assert "ReadTimeout" in outcomes["A"].error
    assert outcomes["B"].action is SyncAction.UPDATED
    assert patched == ["/game-passes/v1/universes/42/game-passes/2"]
    assert store.saves == 1
    assert store.ledger.find_by_name(ResourceCategory.GAME_PASS, "A") == (1, LedgerEntry(name="A"))
    stored_b = store.ledger.find_by_name(ResourceCategory.GAME_PASS, "B")
    assert stored_b is not None
    assert stored_b[0] == 2
    assert stored_b[1].price == 20
