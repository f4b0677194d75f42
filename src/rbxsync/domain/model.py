"""Domain records exchanged between the reconciler, the ledger and the remote port."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence


class ResourceCategory(StrEnum):
    """Monetization resource kinds, in the order a run reconciles them."""

    GAME_PASS = "game_passes"
    DEVELOPER_PRODUCT = "developer_products"
    BADGE = "badges"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ")


class PaymentSource(StrEnum):
    USER = "user"
    GROUP = "group"


@dataclass(frozen=True, slots=True, kw_only=True)
class DeclaredResource:
    """A resource as described by the project configuration."""

    category: ResourceCategory
    name: str
    description: str | None = None
    price: int | None = None
    enabled: bool | None = None
    icon: str | None = None
    payment_source: PaymentSource | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class ResourceFields:
    """Field set sent to the platform on create and update calls."""

    name: str
    description: str | None = None
    price: int | None = None
    enabled: bool | None = None
    icon_asset_id: int | None = None
    payment_source: PaymentSource | None = None

    @classmethod
    def from_declared(
        cls, resource: DeclaredResource, *, icon_asset_id: int | None = None
    ) -> ResourceFields:
        return cls(
            name=resource.name,
            description=resource.description,
            price=resource.price,
            enabled=resource.enabled,
            icon_asset_id=icon_asset_id,
            payment_source=resource.payment_source,
        )


@dataclass(frozen=True, slots=True, kw_only=True)
class LedgerEntry:
    """Last-synced attributes of one remote resource.

    ``icon_asset_id`` is only meaningful together with the hash of the exact
    bytes that produced it, so an asset id without a hash is rejected.
    """

    name: str
    description: str | None = None
    price: int | None = None
    enabled: bool | None = None
    icon_hash: str | None = None
    icon_asset_id: int | None = None

    def __post_init__(self) -> None:
        if self.icon_asset_id is not None and self.icon_hash is None:
            raise ValueError(f"Ledger entry {self.name!r} has an icon asset id but no icon hash")

    @classmethod
    def from_declared(
        cls,
        resource: DeclaredResource,
        *,
        icon_hash: str | None = None,
        icon_asset_id: int | None = None,
    ) -> LedgerEntry:
        return cls(
            name=resource.name,
            description=resource.description,
            price=resource.price,
            enabled=resource.enabled,
            icon_hash=icon_hash,
            icon_asset_id=icon_asset_id,
        )


@dataclass(frozen=True, slots=True, kw_only=True)
class RemoteResource:
    """One item of a remote listing page."""

    identifier: int
    name: str
    description: str | None = None
    price: int | None = None
    enabled: bool | None = None


@dataclass(frozen=True, slots=True)
class ResourcePage:
    items: Sequence[RemoteResource]
    next_cursor: str | None = None


@dataclass(frozen=True, slots=True)
class CompletedOperation:
    """Upload that finished immediately and already carries its asset id."""

    asset_id: int


@dataclass(frozen=True, slots=True)
class PendingOperation:
    """Upload still being processed; ``handle`` must be polled."""

    handle: str


type AssetOperation = CompletedOperation | PendingOperation


@dataclass(frozen=True, slots=True, kw_only=True)
class OperationStatus:
    done: bool
    asset_id: int | None = None
    error: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class UniverseSettings:
    name: str | None = None
    description: str | None = None
    genre: str | None = None
    playable_devices: tuple[str, ...] | None = None

    def is_empty(self) -> bool:
        return all(
            value is None
            for value in (self.name, self.description, self.genre, self.playable_devices)
        )


@dataclass(frozen=True, slots=True, kw_only=True)
class PlaceTarget:
    place_id: int
    file_path: str
    publish: bool = True


@dataclass(frozen=True, slots=True, kw_only=True)
class SyncProject:
    """Desired state of one universe, independent of how it was configured."""

    assets_dir: str = "assets"
    universe: UniverseSettings = field(default_factory=UniverseSettings)
    resources: tuple[DeclaredResource, ...] = ()
    places: tuple[PlaceTarget, ...] = ()

    def resources_for(self, category: ResourceCategory) -> list[DeclaredResource]:
        return [resource for resource in self.resources if resource.category is category]
