"""HTTP client for the Roblox Open Cloud APIs."""

from __future__ import annotations

import asyncio
import json
from logging import getLogger
from typing import TYPE_CHECKING, Any, Unpack

import httpx
from pydantic import BaseModel, ValidationError

from rbxsync.adapters.http_resilience import RequestOptions, ResilientClient
from rbxsync.domain.errors import (
    AssetNotFoundError,
    AssetReadError,
    ParseError,
    RemoteError,
    UploadFailedError,
)
from rbxsync.domain.model import (
    CompletedOperation,
    PaymentSource,
    PendingOperation,
    ResourceCategory,
    ResourcePage,
)

from .schema import (
    CreatedResourceResponse,
    OperationResponse,
    PlaceVersionResponse,
    ResourceListResponse,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Coroutine
    from pathlib import Path
    from types import TracebackType

    from rbxsync.config.http_resilience import ResilienceConfig
    from rbxsync.config.project import CreatorConfig
    from rbxsync.config.roblox import RobloxConfig
    from rbxsync.domain.model import (
        AssetOperation,
        OperationStatus,
        ResourceFields,
        UniverseSettings,
    )

log = getLogger(__name__)

GAME_PASS_PAGE_SIZE = 100
DEVELOPER_PRODUCT_PAGE_SIZE = 50
BADGE_PAGE_SIZE = 100

_CONTENT_TYPES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".bmp": "image/bmp",
    ".tga": "image/tga",
}
_PAYMENT_SOURCE_TYPES = {PaymentSource.USER: "1", PaymentSource.GROUP: "2"}


class RobloxAPIError(RemoteError):
    """Raised when Open Cloud answers with a non-success status or cannot be reached."""


def content_type_for(path: Path) -> str:
    return _CONTENT_TYPES.get(path.suffix.lower(), "image/png")


def _form_value(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _multipart(fields: dict[str, object]) -> dict[str, tuple[None, str]]:
    # A ``None`` filename makes httpx send plain multipart form fields.
    return {key: (None, _form_value(value)) for key, value in fields.items()}


def encode_resource_fields(
    category: ResourceCategory,
    fields: ResourceFields,
    *,
    creating: bool,
) -> dict[str, object]:
    """Translate the domain field set into the names each endpoint expects."""

    body: dict[str, object] = {"name": fields.name}
    if fields.description is not None:
        body["description"] = fields.description
    elif creating:
        body["description"] = ""

    if category is ResourceCategory.BADGE:
        if fields.enabled is not None:
            body["enabled"] = fields.enabled
        if fields.icon_asset_id is not None:
            body["iconImageId"] = fields.icon_asset_id
        if creating and fields.payment_source is not None:
            body["paymentSourceType"] = _PAYMENT_SOURCE_TYPES[fields.payment_source]
        return body

    if fields.price is not None:
        body["price"] = fields.price
    if fields.enabled is not None:
        body["isForSale"] = fields.enabled
    if fields.icon_asset_id is not None:
        body["iconAssetId"] = fields.icon_asset_id
    return body


def encode_universe_settings(settings: UniverseSettings) -> dict[str, object]:
    body: dict[str, object] = {}
    if settings.name is not None:
        body["name"] = settings.name
    if settings.description is not None:
        body["description"] = settings.description
    if settings.genre is not None:
        body["genre"] = settings.genre
    if settings.playable_devices is not None:
        body["playableDevices"] = list(settings.playable_devices)
    return body


class RobloxClient:
    """Blocking facade over an async Open Cloud client.

    One event loop and one HTTP client live for as long as the facade does, so
    the request rate limit applies across a whole run. Use it as a context
    manager, or call ``close`` when done.
    """

    def __init__(
        self,
        *,
        config: RobloxConfig,
        creator: CreatorConfig | None = None,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._creator = creator
        self._client_factory = client_factory or ResilientClient
        self._runner: asyncio.Runner | None = None
        self._client: ResilientClient | None = None

    def __enter__(self) -> RobloxClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        runner = self._runner
        if runner is None:
            return
        try:
            if self._client is not None:
                runner.run(self._client.aclose())
        finally:
            runner.close()
            self._runner = None
            self._client = None

    # --- Remote platform operations ---

    def list_resources(
        self,
        category: ResourceCategory,
        universe_id: int,
        cursor: str | None = None,
    ) -> ResourcePage:
        return self._run(self._list_resources_async(category, universe_id, cursor))

    def create_resource(
        self,
        category: ResourceCategory,
        universe_id: int,
        fields: ResourceFields,
    ) -> int:
        return self._run(self._create_resource_async(category, universe_id, fields))

    def update_resource(
        self,
        category: ResourceCategory,
        universe_id: int,
        identifier: int,
        fields: ResourceFields,
    ) -> None:
        self._run(self._update_resource_async(category, universe_id, identifier, fields))

    def upload_asset(self, path: Path, display_name: str) -> AssetOperation:
        return self._run(self._upload_asset_async(path, display_name))

    def poll_operation(self, handle: str) -> OperationStatus:
        return self._run(self._poll_operation_async(handle))

    def update_universe_settings(self, universe_id: int, settings: UniverseSettings) -> None:
        self._run(self._update_universe_settings_async(universe_id, settings))

    def publish_place(self, universe_id: int, place_id: int, path: Path) -> int:
        return self._run(self._publish_place_async(universe_id, place_id, path))

    # --- Internals ---

    def _run[T](self, coro: Coroutine[Any, Any, T]) -> T:
        if self._runner is None:
            self._runner = asyncio.Runner()
        return self._runner.run(coro)

    def _session(self) -> ResilientClient:
        if self._client is None:
            self._client = self._client_factory(self._resilience)
        return self._client

    async def _request(
        self,
        method: str,
        url: str,
        action: str,
        **kwargs: Unpack[RequestOptions],
    ) -> httpx.Response:
        try:
            return await self._session().request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            log.debug("%s %s raised %r", method, url, exc)
            raise RobloxAPIError(f"{action} failed: {type(exc).__name__}: {exc}") from exc

    def _list_url(self, category: ResourceCategory, universe_id: int) -> str:
        match category:
            case ResourceCategory.GAME_PASS:
                return f"/game-passes/v1/universes/{universe_id}/game-passes"
            case ResourceCategory.DEVELOPER_PRODUCT:
                return f"/developer-products/v2/universes/{universe_id}/developer-products/creator"
            case ResourceCategory.BADGE:
                return f"{self._config.badges_base_url}/v1/universes/{universe_id}/badges"

    @staticmethod
    def _list_params(category: ResourceCategory, cursor: str | None) -> dict[str, str]:
        if category is ResourceCategory.DEVELOPER_PRODUCT:
            params = {"pageSize": str(DEVELOPER_PRODUCT_PAGE_SIZE)}
            if cursor:
                params["pageToken"] = cursor
            return params
        limit = GAME_PASS_PAGE_SIZE if category is ResourceCategory.GAME_PASS else BADGE_PAGE_SIZE
        params = {"limit": str(limit)}
        if cursor:
            params["cursor"] = cursor
        return params

    @staticmethod
    def _create_url(category: ResourceCategory, universe_id: int) -> str:
        match category:
            case ResourceCategory.GAME_PASS:
                return f"/game-passes/v1/universes/{universe_id}/game-passes"
            case ResourceCategory.DEVELOPER_PRODUCT:
                return f"/developer-products/v2/universes/{universe_id}/developer-products"
            case ResourceCategory.BADGE:
                return f"/legacy-badges/v1/universes/{universe_id}/badges"

    @staticmethod
    def _update_url(category: ResourceCategory, universe_id: int, identifier: int) -> str:
        match category:
            case ResourceCategory.GAME_PASS:
                return f"/game-passes/v1/universes/{universe_id}/game-passes/{identifier}"
            case ResourceCategory.DEVELOPER_PRODUCT:
                return (
                    f"/developer-products/v2/universes/{universe_id}"
                    f"/developer-products/{identifier}"
                )
            case ResourceCategory.BADGE:
                return f"/legacy-badges/v1/badges/{identifier}"

    async def _list_resources_async(
        self,
        category: ResourceCategory,
        universe_id: int,
        cursor: str | None,
    ) -> ResourcePage:
        url = self._list_url(category, universe_id)
        params = self._list_params(category, cursor)
        log.debug("Listing %s: GET %s %s", category.label, url, params)
        response = await self._request("GET", url, f"List {category.label}", params=params)
        _raise_for_status(response, f"List {category.label}")
        payload = _validate(ResourceListResponse, response, f"{category.label} listing")
        return ResourcePage(
            items=[item.to_domain() for item in payload.data],
            next_cursor=payload.next_page_cursor or None,
        )

    async def _create_resource_async(
        self,
        category: ResourceCategory,
        universe_id: int,
        fields: ResourceFields,
    ) -> int:
        url = self._create_url(category, universe_id)
        body = encode_resource_fields(category, fields, creating=True)
        log.debug("Creating %s at %s with %s", category.label, url, body)
        response = await self._request(
            "POST", url, f"Create {category.label}", files=_multipart(body)
        )
        _raise_for_status(response, f"Create {category.label}")
        created = _validate(CreatedResourceResponse, response, f"created {category.label}")
        log.info("Created %s %r with id %s", category.label, fields.name, created.id)
        return created.id

    async def _update_resource_async(
        self,
        category: ResourceCategory,
        universe_id: int,
        identifier: int,
        fields: ResourceFields,
    ) -> None:
        url = self._update_url(category, universe_id, identifier)
        body = encode_resource_fields(category, fields, creating=False)
        log.debug("Updating %s at %s with %s", category.label, url, body)
        action = f"Update {category.label} {identifier}"
        if category is ResourceCategory.BADGE:
            response = await self._request("PATCH", url, action, json=body)
        else:
            response = await self._request("PATCH", url, action, files=_multipart(body))
        # Update endpoints may answer with an empty body; nothing is read from it.
        _raise_for_status(response, action)

    async def _upload_asset_async(self, path: Path, display_name: str) -> AssetOperation:
        if self._creator is None:
            raise UploadFailedError("No creator configured for asset uploads")

        try:
            content = path.read_bytes()
        except FileNotFoundError as exc:
            raise AssetNotFoundError(f"Asset file not found: {path}") from exc
        except OSError as exc:
            raise AssetReadError(f"Could not read {path}: {exc}") from exc

        creator = (
            {"groupId": self._creator.id}
            if self._creator.kind == "group"
            else {"userId": self._creator.id}
        )
        request = {
            "assetType": "Image",
            "displayName": display_name,
            "description": f"Uploaded by rbxsync from {path.name}",
            "creationContext": {"creator": creator},
        }
        request_json = json.dumps(request)
        log.debug("Asset upload request: %s", request_json)

        response = await self._request(
            "POST",
            "/assets/v1/assets",
            "Asset upload",
            files={
                "request": (None, request_json),
                "fileContent": (path.name, content, content_type_for(path)),
            },
        )
        _raise_for_status(response, "Asset upload")
        operation = _validate(OperationResponse, response, "asset operation")
        log.debug("Initial operation response: %s", response.text)

        if operation.error_message is not None:
            raise UploadFailedError(f"Asset operation failed: {operation.error_message}")
        if operation.done and operation.asset_id is not None:
            return CompletedOperation(asset_id=operation.asset_id)
        if operation.done:
            raise UploadFailedError("no identifier returned")
        if not operation.path:
            raise ParseError("Operation response missing 'path' field")
        return PendingOperation(handle=operation.path)

    async def _poll_operation_async(self, handle: str) -> OperationStatus:
        url = f"/assets/v1/{handle.lstrip('/')}"
        response = await self._request("GET", url, f"Poll operation {handle}")
        _raise_for_status(response, f"Poll operation {handle}")
        log.debug("Poll response: %s", response.text)
        return _validate(OperationResponse, response, "operation poll").to_status()

    async def _update_universe_settings_async(
        self,
        universe_id: int,
        settings: UniverseSettings,
    ) -> None:
        url = f"/cloud/v2/universes/{universe_id}"
        body = encode_universe_settings(settings)
        log.debug("Updating universe at %s with %s", url, body)
        response = await self._request("PATCH", url, f"Update universe {universe_id}", json=body)
        _raise_for_status(response, f"Update universe {universe_id}")

    async def _publish_place_async(self, universe_id: int, place_id: int, path: Path) -> int:
        try:
            content = path.read_bytes()
        except FileNotFoundError as exc:
            raise AssetNotFoundError(f"Place file not found: {path}") from exc
        except OSError as exc:
            raise AssetReadError(f"Could not read {path}: {exc}") from exc

        url = f"/universes/v1/{universe_id}/places/{place_id}/versions"
        log.debug("Publishing %s (%s bytes) to %s", path, len(content), url)
        response = await self._request(
            "POST",
            url,
            f"Publish place {place_id}",
            params={"versionType": "Published"},
            content=content,
            headers={"Content-Type": "application/octet-stream"},
        )
        _raise_for_status(response, f"Publish place {place_id}")
        return _validate(PlaceVersionResponse, response, "place version").version_number


def _raise_for_status(response: httpx.Response, action: str) -> None:
    if response.is_success:
        return
    body = response.text
    log.debug("API response status: %s, body: %s", response.status_code, body)
    raise RobloxAPIError(
        f"{action} failed: {response.status_code} - {body}",
        status_code=response.status_code,
        body=body,
    )


def _validate[TModel: BaseModel](
    model: type[TModel],
    response: httpx.Response,
    what: str,
) -> TModel:
    try:
        payload = response.json()
    except ValueError as exc:
        raise ParseError(f"Failed to parse {what} response: {response.text!r}") from exc
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise ParseError(f"Unexpected {what} payload: {exc}") from exc
