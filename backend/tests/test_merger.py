#!/usr/bin/env python3

from __future__ import annotations

from backend.app.services.events.merger import combine, filter_by_radius, sort_events, summarize
from backend.app.services.events.models import Event, EventCategory, EventSource, Location

from conftest import ORIGIN, locator_record, north_of_origin, scraper_record


def test_duplicate_listing_keeps_scraper_version() -> None:
    events = combine([scraper_record()], [locator_record()], ORIGIN, 50)

    assert len(events) == 1
    event = events[0]
    assert event.source is EventSource.SCRAPER
    assert event.category is EventCategory.CUP
    assert event.date == "2026-01-13"
    # Locator-only attributes of the duplicate are discarded.
    assert event.cost == ""
    assert event.registration_url == ""


def test_every_colliding_key_yields_one_scraper_event() -> None:
    shops = ["Joe's Cards", "Game Kastle", "Card Haven #2", "Dragon's Lair"]
    scraper = [scraper_record(shop=shop) for shop in shops]
    locator = [locator_record(shop=shop.upper().replace("'", "")) for shop in shops]

    events = combine(scraper, locator, ORIGIN, 50)

    assert len(events) == len(shops)
    assert all(event.source is EventSource.SCRAPER for event in events)


def test_same_shop_different_category_is_not_a_duplicate() -> None:
    events = combine(
        [scraper_record(type="League Cup")],
        [locator_record(type="League Challenge")],
        ORIGIN,
        50,
    )

    assert {(event.source, event.category) for event in events} == {
        (EventSource.SCRAPER, EventCategory.CUP),
        (EventSource.THIRD_PARTY, EventCategory.CHALLENGE),
    }


def test_locator_event_outside_radius_is_excluded() -> None:
    far = locator_record(shop="Far Away Games", latitude=north_of_origin(120))

    assert combine([], [far], ORIGIN, 50) == []


def test_locator_events_within_radius_carry_distance() -> None:
    events = combine([], [locator_record(shop="Near Games")], ORIGIN, 50)

    assert len(events) == 1
    assert events[0].source is EventSource.THIRD_PARTY
    assert 7.5 < events[0].distance_miles < 8.5
    assert events[0].time == "17:30"
    assert events[0].has_juniors is False
    assert events[0].has_masters is True


def test_returned_locator_events_respect_radius() -> None:
    records = [
        locator_record(shop=f"Shop {miles}", latitude=north_of_origin(miles))
        for miles in (1, 10, 49, 51, 80, 200)
    ]

    events = combine([], records, ORIGIN, 50)

    assert [event.shop for event in events] == ["Shop 1", "Shop 10", "Shop 49"]
    assert all(event.distance_miles <= 50 for event in events)


def test_locator_event_without_coordinates_is_excluded_with_origin() -> None:
    record = locator_record(shop="Nowhere Games", latitude=None, longitude=None)

    assert combine([], [record], ORIGIN, 50) == []
    assert len(combine([], [record], None, 50)) == 1


def test_scraper_events_are_never_excluded_by_distance() -> None:
    events = combine([scraper_record(shop="Remote Store")], [], Location(0.0, 0.0), 1)

    assert len(events) == 1
    assert events[0].distance_miles is None


def test_unparseable_scraper_date_is_dropped() -> None:
    events = combine([scraper_record(date="sometime in January")], [], ORIGIN, 50)

    assert events == []


def test_malformed_records_are_dropped() -> None:
    events = combine(
        [scraper_record(shop=""), scraper_record(type="Prerelease", shop="Other")],
        [locator_record(date="", shop="X"), locator_record(shop="", date="2026-01-14")],
        ORIGIN,
        50,
    )

    assert events == []


def test_duplicate_scraper_records_collapse() -> None:
    events = combine([scraper_record(), scraper_record(name="Duplicate")], [], ORIGIN, 50)

    assert len(events) == 1
    assert events[0].name == "League Cup"


def test_near_locator_listing_is_not_shadowed_by_far_one() -> None:
    far = locator_record(guid="far", latitude=north_of_origin(120))
    near = locator_record(guid="near", latitude=north_of_origin(5))

    events = combine([], [far, near], ORIGIN, 50)

    assert [event.id for event in events] == ["near"]


def test_output_sorted_by_date_then_distance() -> None:
    records = [
        locator_record(shop="B", date="2026-01-14", latitude=north_of_origin(20)),
        locator_record(shop="C", date="2026-01-13", latitude=north_of_origin(30)),
        locator_record(shop="D", date="2026-01-13", latitude=north_of_origin(2)),
    ]
    scraper = [scraper_record(shop="A", date="Monday, January 12, 2026")]

    events = combine(scraper, records, ORIGIN, 50)

    assert [event.shop for event in events] == ["A", "D", "C", "B"]
    dates = [event.date for event in events]
    assert dates == sorted(dates)


def test_sort_is_stable_without_distances() -> None:
    first = Event(source=EventSource.SCRAPER, category=EventCategory.CUP, name="1", date="2026-01-13")
    second = Event(source=EventSource.SCRAPER, category=EventCategory.CUP, name="2", date="2026-01-13")

    assert [event.name for event in sort_events([first, second])] == ["1", "2"]
    assert [event.name for event in sort_events([second, first])] == ["2", "1"]


def test_filter_by_radius_recomputes_for_new_origin() -> None:
    events = combine([scraper_record(shop="Store")], [locator_record(shop="Near")], ORIGIN, 100)
    elsewhere = Location(ORIGIN.latitude + 2, ORIGIN.longitude)

    filtered = filter_by_radius(events, elsewhere, 50)

    assert [event.source for event in filtered] == [EventSource.SCRAPER]


def test_filter_by_radius_without_origin_clears_distances() -> None:
    events = combine([], [locator_record()], ORIGIN, 50)

    filtered = filter_by_radius(events, None, 50)

    assert len(filtered) == 1
    assert filtered[0].distance_miles is None


def test_summarize_counts_sources_and_stores() -> None:
    events = combine(
        [scraper_record(shop="A"), scraper_record(shop="A", type="League Challenge")],
        [locator_record(shop="B")],
        ORIGIN,
        50,
    )

    summary = summarize(events)

    assert summary.total_events == 3
    assert summary.from_scraper == 2
    assert summary.from_third_party == 1
    assert summary.unique_stores == 2
