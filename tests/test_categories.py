from tournacal.categories import (
    CATEGORY_DISPLAY_ORDER,
    EventCategory,
    category_color,
    category_counts,
    category_label,
    get_event_category,
    parse_category,
)


def test_regional_by_name_without_url(make_tournament) -> None:
    tournament = make_tournament(event_name="2026 Regional Qualifier", event_url=None)
    category = get_event_category(tournament)
    assert category is EventCategory.REGIONAL
    assert category_color(category) == "#f59e0b"


def test_regional_by_url(make_tournament) -> None:
    tournament = make_tournament(
        event_name="Yu-Gi-Oh! Open",
        event_url="https://www.yugioh-card.com/eu/event-category/opens/",
    )
    assert get_event_category(tournament) is EventCategory.REGIONAL


def test_open_dueling_wins_over_later_rules(make_tournament) -> None:
    tournament = make_tournament(event_name="Open Dueling - Regional warmup")
    assert get_event_category(tournament) is EventCategory.FREE_PLAY


def test_national_matches_hungarian_name(make_tournament) -> None:
    assert get_event_category(make_tournament(event_name="Nemzeti Bajnokság")) is EventCategory.NATIONAL
    assert get_event_category(make_tournament(event_name="WCQ: National")) is EventCategory.NATIONAL


def test_ots_and_default_local(make_tournament) -> None:
    assert get_event_category(make_tournament(event_name="OTS Championship")) is EventCategory.OTS
    assert get_event_category(make_tournament(event_name="Local Event")) is EventCategory.LOCAL
    assert get_event_category(make_tournament(event_name="")) is EventCategory.LOCAL


def test_category_counts_include_empty_categories(make_tournament) -> None:
    counts = category_counts([make_tournament(), make_tournament("2", event_name="OTS Championship")])
    assert list(counts) == list(CATEGORY_DISPLAY_ORDER)
    assert counts[EventCategory.LOCAL] == 1
    assert counts[EventCategory.OTS] == 1
    assert counts[EventCategory.NATIONAL] == 0


def test_labels_and_lookup() -> None:
    assert category_label(EventCategory.FREE_PLAY, "hu") == "Szabad Játék"
    assert category_label(EventCategory.NATIONAL, "en") == "National"
    assert parse_category("nemzeti") is EventCategory.NATIONAL
    assert parse_category("Free Play") is EventCategory.FREE_PLAY
    assert parse_category("unknown") is None
