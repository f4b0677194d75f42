"""Pydantic models describing the Roblox Open Cloud payloads."""

from __future__ import annotations

from collections.abc import Mapping
from typing import cast

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

from rbxsync.domain.model import OperationStatus, RemoteResource


class RobloxBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


_ID_ALIASES = AliasChoices("id", "gamePassId", "productId", "developerProductId")


class ResourcePayload(RobloxBaseModel):
    id: int = Field(validation_alias=_ID_ALIASES)
    name: str
    description: str | None = None
    price: int | None = Field(default=None, validation_alias=AliasChoices("price", "priceInRobux"))
    enabled: bool | None = Field(
        default=None, validation_alias=AliasChoices("isForSale", "enabled")
    )

    @model_validator(mode="before")
    @classmethod
    def _flatten_price_information(cls, value: object) -> object:
        if not isinstance(value, Mapping):
            return value
        data = dict(cast(Mapping[str, object], value))
        info = data.get("priceInformation")
        if "price" not in data and "priceInRobux" not in data and isinstance(info, Mapping):
            price_info = cast(Mapping[str, object], info)
            data["price"] = price_info.get("defaultPriceInRobux")
        return data

    def to_domain(self) -> RemoteResource:
        return RemoteResource(
            identifier=self.id,
            name=self.name,
            description=self.description,
            price=self.price,
            enabled=self.enabled,
        )


class ResourceListResponse(RobloxBaseModel):
    data: list[ResourcePayload] = Field(
        validation_alias=AliasChoices("data", "gamePasses", "developerProducts", "badges")
    )
    next_page_cursor: str | None = Field(
        default=None, validation_alias=AliasChoices("nextPageCursor", "nextPageToken")
    )


class CreatedResourceResponse(RobloxBaseModel):
    id: int = Field(validation_alias=_ID_ALIASES)


class OperationResult(RobloxBaseModel):
    asset_id: int | None = Field(default=None, alias="assetId")


class OperationErrorPayload(RobloxBaseModel):
    code: int | str | None = None
    message: str | None = None


class OperationResponse(RobloxBaseModel):
    path: str | None = None
    done: bool | None = None
    response: OperationResult | None = None
    error: OperationErrorPayload | None = None

    @property
    def asset_id(self) -> int | None:
        return self.response.asset_id if self.response is not None else None

    @property
    def error_message(self) -> str | None:
        if self.error is None:
            return None
        return self.error.message or "Unknown error"

    def to_status(self) -> OperationStatus:
        return OperationStatus(
            done=bool(self.done),
            asset_id=self.asset_id,
            error=self.error_message,
        )


class PlaceVersionResponse(RobloxBaseModel):
    version_number: int = Field(alias="versionNumber")
