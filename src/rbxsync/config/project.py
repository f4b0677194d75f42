"""Project file (``rbxsync.yaml``) schema and loader."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Literal

import yaml
from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
)

from rbxsync.domain.model import (
    DeclaredResource,
    PaymentSource,
    PlaceTarget,
    ResourceCategory,
    SyncProject,
    UniverseSettings,
)

from .errors import ProjectConfigError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

log = getLogger(__name__)


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class ProjectBaseModel(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True, str_strip_whitespace=True)


class CreatorModel(ProjectBaseModel):
    type: Literal["user", "group"] = "user"
    id: str

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: object) -> object:
        if isinstance(value, int):
            return str(value)
        return value


class UniverseModel(ProjectBaseModel):
    name: str | None = None
    description: str | None = None
    genre: str | None = None
    playable_devices: list[str] | None = None


class _ResourceModel(ProjectBaseModel):
    name: str = Field(min_length=1)
    description: str | None = None
    icon: str | None = None

    _normalize_icon = field_validator("icon", mode="before")(_blank_to_none)


class GamePassModel(_ResourceModel):
    price: int | None = Field(
        default=None, ge=0, validation_alias=AliasChoices("price", "price_in_robux")
    )
    is_for_sale: bool | None = None


class DeveloperProductModel(_ResourceModel):
    price: int | None = Field(
        default=None, ge=0, validation_alias=AliasChoices("price", "price_in_robux")
    )
    is_for_sale: bool | None = None


class BadgeModel(_ResourceModel):
    is_enabled: bool | None = None
    payment_source_type: PaymentSource | None = None

    @field_validator("payment_source_type", mode="before")
    @classmethod
    def _lower_payment_source(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value


class PlaceModel(ProjectBaseModel):
    place_id: int = Field(gt=0)
    file_path: str = Field(min_length=1)
    publish: bool = True


def _reject_duplicate_names(items: Sequence[_ResourceModel], *, key: str) -> None:
    seen: set[str] = set()
    for item in items:
        folded = item.name.casefold()
        if folded in seen:
            raise ValueError(f"duplicate {key} name {item.name!r} (names are case-insensitive)")
        seen.add(folded)


class ProjectFile(ProjectBaseModel):
    assets_dir: str = "assets"
    creator: CreatorModel | None = None
    universe: UniverseModel = Field(default_factory=UniverseModel)
    game_passes: list[GamePassModel] = Field(default_factory=list)
    developer_products: list[DeveloperProductModel] = Field(default_factory=list)
    badges: list[BadgeModel] = Field(default_factory=list)
    places: list[PlaceModel] = Field(default_factory=list)

    @field_validator("game_passes", "developer_products", "badges")
    @classmethod
    def _unique_names(
        cls, value: list[_ResourceModel], info: ValidationInfo
    ) -> list[_ResourceModel]:
        _reject_duplicate_names(value, key=info.field_name or "resource")
        return value


@dataclass(frozen=True, slots=True)
class CreatorConfig:
    """Owner of uploaded assets."""

    kind: Literal["user", "group"]
    id: str


@dataclass(frozen=True, slots=True)
class ProjectConfig:
    project: SyncProject
    creator: CreatorConfig | None = None


def parse_project_config(payload: object) -> ProjectConfig:
    """Validate a decoded project document and translate it into domain records."""

    if payload is None:
        payload = {}
    try:
        document = ProjectFile.model_validate(payload)
    except ValidationError as exc:
        raise ProjectConfigError(f"Invalid project configuration:\n{exc}") from exc
    return _to_project_config(document)


def load_project_config(path: Path) -> ProjectConfig:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ProjectConfigError(f"Project file not found: {path}") from exc
    try:
        payload = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ProjectConfigError(f"Could not parse {path}: {exc}") from exc
    log.debug("Loaded project configuration from %s", path)
    return parse_project_config(payload)


def _to_project_config(document: ProjectFile) -> ProjectConfig:
    resources: list[DeclaredResource] = []
    resources.extend(
        DeclaredResource(
            category=ResourceCategory.GAME_PASS,
            name=item.name,
            description=item.description,
            price=item.price,
            enabled=item.is_for_sale,
            icon=item.icon,
        )
        for item in document.game_passes
    )
    resources.extend(
        DeclaredResource(
            category=ResourceCategory.DEVELOPER_PRODUCT,
            name=item.name,
            description=item.description,
            price=item.price,
            enabled=item.is_for_sale,
            icon=item.icon,
        )
        for item in document.developer_products
    )
    resources.extend(
        DeclaredResource(
            category=ResourceCategory.BADGE,
            name=item.name,
            description=item.description,
            enabled=item.is_enabled,
            icon=item.icon,
            payment_source=item.payment_source_type,
        )
        for item in document.badges
    )

    universe = document.universe
    project = SyncProject(
        assets_dir=document.assets_dir,
        universe=UniverseSettings(
            name=universe.name,
            description=universe.description,
            genre=universe.genre,
            playable_devices=(
                tuple(universe.playable_devices) if universe.playable_devices is not None else None
            ),
        ),
        resources=tuple(resources),
        places=tuple(
            PlaceTarget(place_id=place.place_id, file_path=place.file_path, publish=place.publish)
            for place in document.places
        ),
    )
    creator = (
        CreatorConfig(kind=document.creator.type, id=document.creator.id)
        if document.creator is not None
        else None
    )
    return ProjectConfig(project=project, creator=creator)
