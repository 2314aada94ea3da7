# backend/tests/test_query_builder.py
from __future__ import annotations

from datetime import datetime

import pytest
from sqlalchemy import select

from app.errors import InvalidFilterValue
from app.models import Property, User
from app.services.query_builder import (
    INT_MAX,
    INT_MIN,
    FilterSpec,
    FilterTableError,
    SearchSpec,
    SortSpec,
    parse_datetime,
)
from app.services.search_specs import INQUIRY_SEARCH, NOTIFICATION_SEARCH, PROPERTY_SEARCH


def test_unknown_filters_are_ignored_and_order_is_table_order():
    params = PROPERTY_SEARCH.parse({"price_max": "500", "bogus": "x", "country": "Peru", "query": "lake"})
    assert list(params.values) == ["query", "country", "price_max"]
    assert params.values["price_max"] == 500.0
    assert [p.op for p in params.predicates] == ["contains", "contains", "lte"]


def test_blank_values_are_absent():
    params = PROPERTY_SEARCH.parse({"country": "   ", "price_min": ""})
    assert params.predicates == []


def test_limit_is_clamped_and_offset_floored():
    params = PROPERTY_SEARCH.parse({"limit": "1000", "offset": "-5"})
    assert params.limit == 100
    assert params.offset == 0

    params = PROPERTY_SEARCH.parse({"limit": "0"})
    assert params.limit == 1


def test_non_integer_limit_is_rejected():
    with pytest.raises(InvalidFilterValue) as ei:
        PROPERTY_SEARCH.parse({"limit": "ten"})
    assert ei.value.field == "limit"
    assert ei.value.status_code == 400


def test_integers_wider_than_bigint_are_rejected():
    for name in ("bedrooms_min", "offset"):
        with pytest.raises(InvalidFilterValue) as ei:
            PROPERTY_SEARCH.parse({name: str(INT_MAX + 1)})
        assert ei.value.field == name

    with pytest.raises(InvalidFilterValue):
        PROPERTY_SEARCH.parse({"year_built_min": str(INT_MIN - 1)})

    p = PROPERTY_SEARCH.parse({"bedrooms_min": str(INT_MAX), "offset": " 40 "})
    assert p.values["bedrooms_min"] == INT_MAX
    assert p.offset == 40


def test_defaults_per_resource():
    assert PROPERTY_SEARCH.parse({}).limit == 20
    assert INQUIRY_SEARCH.parse({}).limit == 10
    p = PROPERTY_SEARCH.parse({})
    assert (p.sort_key, p.sort_order, p.offset) == ("created_at", "desc", 0)


def test_unknown_sort_falls_back_to_default():
    p = PROPERTY_SEARCH.parse({"sort_by": "owner_password", "sort_order": "sideways"})
    assert p.sort_key == "created_at"
    assert p.sort_order == "desc"

    p = PROPERTY_SEARCH.parse({"sort_by": "price", "sort_order": "ASC"})
    assert (p.sort_key, p.sort_order) == ("price", "asc")


@pytest.mark.parametrize(
    "name,raw",
    [
        ("price_min", "cheap"),
        ("price_min", "nan"),
        ("bedrooms_min", "2.5"),
        ("is_featured", "maybe"),
        ("property_type", "castle"),
        ("status", "ACTIVE"),
    ],
)
def test_malformed_values_raise(name, raw):
    with pytest.raises(InvalidFilterValue) as ei:
        PROPERTY_SEARCH.parse({name: raw})
    assert ei.value.field == name


def test_bool_and_datetime_coercion():
    p = NOTIFICATION_SEARCH.parse({"is_read": "No", "date_from": "2026-01-02T03:04:05Z", "date_to": "2026-02-01"})
    assert p.values["is_read"] is False
    assert p.values["date_from"] == datetime(2026, 1, 2, 3, 4, 5)
    assert p.values["date_to"] == datetime(2026, 2, 1)


def test_parse_datetime_normalises_offsets_to_naive_utc():
    assert parse_datetime("d", "2026-01-01T05:00:00+02:00") == datetime(2026, 1, 1, 3, 0, 0)
    with pytest.raises(InvalidFilterValue):
        parse_datetime("d", "yesterday")


def test_malformed_tables_are_programming_errors():
    with pytest.raises(FilterTableError):
        FilterSpec("price", Property.price, "contains", "number")
    with pytest.raises(FilterTableError):
        FilterSpec("title", Property.title, "gte", "text")
    with pytest.raises(FilterTableError):
        FilterSpec("kind", Property.property_type, "eq", "choice")
    with pytest.raises(FilterTableError):
        SearchSpec(
            "dup",
            filters=(FilterSpec("a", Property.title, "contains"), FilterSpec("a", Property.city, "contains")),
            sorts=(SortSpec("created_at", Property.created_at),),
            tiebreak=Property.property_id,
        )
    with pytest.raises(FilterTableError):
        SearchSpec("nosort", filters=(), sorts=(SortSpec("price", Property.price),), tiebreak=Property.property_id)


def _seed(db, n: int) -> None:
    owner = User(email="qb@example.com", password_hash="x", name="qb", user_type="seller")
    db.add(owner)
    db.flush()
    for i in range(n):
        db.add(
            Property(
                user_id=owner.user_id,
                title=f"Listing {i}" if i != 3 else "100% off-grid_cabin",
                description="Meadow and pond" if i % 2 else "Forest edge",
                property_type="land",
                price=1000.0 * (i + 1),
                country="Chile",
                status="active",
            )
        )
    db.commit()


def test_fetch_counts_full_match_set_and_pages(db):
    _seed(db, 7)
    params = PROPERTY_SEARCH.parse({"price_min": "2000", "limit": "2", "offset": "2", "sort_by": "price", "sort_order": "asc"})
    page = PROPERTY_SEARCH.fetch(db, select(Property), params)

    assert page.total_count == 6
    assert [r.price for r in page.items] == [4000.0, 5000.0]
    env = page.envelope("properties", [])
    assert env["page"] == 2
    assert env["per_page"] == 2
    assert env["total_pages"] == 3


def test_contains_is_case_insensitive_and_spans_columns(db):
    _seed(db, 4)
    page = PROPERTY_SEARCH.fetch(db, select(Property), PROPERTY_SEARCH.parse({"query": "POND"}))
    assert page.total_count == 2


def test_like_wildcards_in_values_match_literally(db):
    _seed(db, 5)
    page = PROPERTY_SEARCH.fetch(db, select(Property), PROPERTY_SEARCH.parse({"query": "100%"}))
    assert [r.title for r in page.items] == ["100% off-grid_cabin"]

    page = PROPERTY_SEARCH.fetch(db, select(Property), PROPERTY_SEARCH.parse({"query": "d_c"}))
    assert page.total_count == 1


def test_empty_result_has_zero_pages(db):
    _seed(db, 2)
    page = PROPERTY_SEARCH.fetch(db, select(Property), PROPERTY_SEARCH.parse({"country": "Atlantis"}))
    assert page.items == []
    assert page.total_count == 0
    assert page.total_pages == 0


def test_ties_page_deterministically(db):
    owner = User(email="tie@example.com", password_hash="x", name="tie", user_type="seller")
    db.add(owner)
    db.flush()
    for i in range(6):
        db.add(Property(user_id=owner.user_id, title=f"T{i}", description="d", property_type="land",
                        price=5000.0, country="Chile"))
    db.commit()

    def ids(offset: str) -> list[str]:
        params = PROPERTY_SEARCH.parse({"sort_by": "price", "limit": "3", "offset": offset})
        return [r.property_id for r in PROPERTY_SEARCH.fetch(db, select(Property), params).items]

    first, second = ids("0"), ids("3")
    assert ids("0") == first
    assert not set(first) & set(second)
    assert sorted(first + second) == first + second
