"""Remote resource directory: the live listing of a category, fully paginated."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from .errors import ParseError

if TYPE_CHECKING:
    from .model import RemoteResource, ResourceCategory
    from .ports.remote import RemotePlatform

log = getLogger(__name__)


def list_all(
    remote: RemotePlatform,
    category: ResourceCategory,
    universe_id: int,
) -> list[RemoteResource]:
    """Return every item of ``category`` across all listing pages.

    Errors on any page propagate; callers never see a partial listing.
    """

    items: list[RemoteResource] = []
    seen_cursors: set[str] = set()
    cursor: str | None = None
    pages = 0
    while True:
        page = remote.list_resources(category, universe_id, cursor)
        pages += 1
        items.extend(page.items)
        cursor = page.next_cursor
        if not cursor:
            break
        if cursor in seen_cursors:
            raise ParseError(f"Listing of {category.label} repeated cursor {cursor!r}")
        seen_cursors.add(cursor)

    log.debug("Listed %s %s across %s page(s)", len(items), category.label, pages)
    return items


def resolve_directory(
    remote: RemotePlatform,
    category: ResourceCategory,
    universe_id: int,
) -> dict[str, int]:
    """Map remote names to identifiers for ``category``; last seen wins on duplicates."""

    directory: dict[str, int] = {}
    for item in list_all(remote, category, universe_id):
        previous = directory.get(item.name)
        if previous is not None and previous != item.identifier:
            log.debug(
                "Duplicate remote %s name %r: %s replaces %s",
                category.label,
                item.name,
                item.identifier,
                previous,
            )
        directory[item.name] = item.identifier
    return directory


def lookup(directory: dict[str, int], name: str) -> int | None:
    """Find ``name`` in a directory snapshot, falling back to a case-insensitive match."""

    identifier = directory.get(name)
    if identifier is not None:
        return identifier
    wanted = name.casefold()
    match: int | None = None
    for remote_name, remote_id in directory.items():
        if remote_name.casefold() == wanted:
            match = remote_id
    return match
