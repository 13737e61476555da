"""Tests for derived values on ORM models."""

from datetime import date
from decimal import Decimal

from crowdvest.database.models import CampaignUsage, LuckyDraw, LuckyDrawEntry


def test_total_entries_adds_base_and_bonus():
    entry = LuckyDrawEntry(base_entries=3, bonus_entries=2)
    assert entry.total_entries == 5


def test_total_entries_treats_unset_columns_as_zero():
    assert LuckyDrawEntry(base_entries=None, bonus_entries=4).total_entries == 4
    assert LuckyDrawEntry(base_entries=2, bonus_entries=None).total_entries == 2
    assert LuckyDrawEntry().total_entries == 0


def test_total_entries_uses_column_defaults_after_flush(temp_db, users):
    session = temp_db._get_session()
    draw = LuckyDraw(
        name="October Draw",
        draw_date=date(2026, 10, 31),
        prize_structure=[{"rank": 1, "amount": "5000.00"}],
    )
    session.add(draw)
    session.flush()
    entry = LuckyDrawEntry(lucky_draw_id=draw.id, user_id=users["alice"], bonus_entries=2)
    session.add(entry)
    session.commit()

    stored = session.get(LuckyDrawEntry, entry.id)
    assert stored.base_entries == 1
    assert stored.total_entries == 3


def test_campaign_usage_final_amount():
    usage = CampaignUsage(
        original_amount=Decimal("5000.00"),
        discount_applied=Decimal("300.00"),
    )
    assert usage.final_amount == Decimal("4700.00")


def test_campaign_usage_final_amount_without_discount():
    usage = CampaignUsage(original_amount=Decimal("1200.50"), discount_applied=Decimal("0"))
    assert usage.final_amount == Decimal("1200.50")
