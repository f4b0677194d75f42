from __future__ import annotations

import pytest

from rbxsync.domain import Ledger, LedgerEntry, ResourceCategory


def test_find_by_name_is_case_insensitive() -> None:
    ledger = Ledger()
    ledger.upsert(ResourceCategory.GAME_PASS, 10, LedgerEntry(name="VIP"))

    assert ledger.find_by_name(ResourceCategory.GAME_PASS, "vip") == (10, LedgerEntry(name="VIP"))
    assert ledger.find_by_name(ResourceCategory.BADGE, "VIP") is None


def test_find_by_id_is_scoped_to_category() -> None:
    ledger = Ledger()
    ledger.upsert(ResourceCategory.BADGE, 10, LedgerEntry(name="Explorer"))

    assert ledger.find_by_id(ResourceCategory.BADGE, 10) == LedgerEntry(name="Explorer")
    assert ledger.find_by_id(ResourceCategory.GAME_PASS, 10) is None


def test_upsert_replaces_wholesale() -> None:
    ledger = Ledger()
    ledger.upsert(
        ResourceCategory.GAME_PASS,
        10,
        LedgerEntry(name="VIP", price=100, icon_hash="h1", icon_asset_id=1),
    )
    ledger.upsert(ResourceCategory.GAME_PASS, 10, LedgerEntry(name="VIP", price=150))

    assert ledger.find_by_id(ResourceCategory.GAME_PASS, 10) == LedgerEntry(name="VIP", price=150)
    assert len(ledger) == 1


def test_upsert_records_icon_in_asset_index() -> None:
    ledger = Ledger()
    ledger.upsert(
        ResourceCategory.GAME_PASS,
        10,
        LedgerEntry(name="VIP", icon_hash="h1", icon_asset_id=555),
    )

    assert ledger.known_asset("h1") == 555
    assert ledger.known_asset("h2") is None


def test_asset_index_keeps_replaced_icons() -> None:
    ledger = Ledger()
    ledger.upsert(
        ResourceCategory.GAME_PASS, 10, LedgerEntry(name="VIP", icon_hash="h1", icon_asset_id=1)
    )
    ledger.upsert(
        ResourceCategory.GAME_PASS, 10, LedgerEntry(name="VIP", icon_hash="h2", icon_asset_id=2)
    )

    assert ledger.entries(ResourceCategory.GAME_PASS)[10].icon_hash == "h2"
    assert ledger.assets == {"h1": 1, "h2": 2}


def test_upsert_drops_stale_identifier_with_same_name() -> None:
    ledger = Ledger()
    ledger.upsert(ResourceCategory.GAME_PASS, 10, LedgerEntry(name="VIP"))
    ledger.upsert(ResourceCategory.GAME_PASS, 11, LedgerEntry(name="vip"))

    assert ledger.find_by_id(ResourceCategory.GAME_PASS, 10) is None
    assert ledger.find_by_name(ResourceCategory.GAME_PASS, "VIP") == (11, LedgerEntry(name="vip"))


def test_copy_is_independent() -> None:
    ledger = Ledger()
    ledger.upsert(ResourceCategory.GAME_PASS, 10, LedgerEntry(name="VIP"))
    copied = ledger.copy()
    copied.upsert(ResourceCategory.GAME_PASS, 11, LedgerEntry(name="Coins"))
    copied.upsert(
        ResourceCategory.BADGE, 12, LedgerEntry(name="Explorer", icon_hash="h1", icon_asset_id=1)
    )

    assert copied != ledger
    assert len(ledger) == 1
    assert ledger.assets == {}


def test_entry_rejects_asset_id_without_hash() -> None:
    with pytest.raises(ValueError, match="no icon hash"):
        LedgerEntry(name="VIP", icon_asset_id=5)
