from __future__ import annotations

from tunei.services.analytics_service import compute_analytics
from tunei.services.relevance import filter_and_sort, matches_query


def test_blank_query_returns_whole_pool_newest_first(make_item):
    old = make_item(title="old", publish_date="2024-01-01T00:00:00+00:00")
    new = make_item(title="new", publish_date="2024-03-01T00:00:00+00:00")
    mid = make_item(title="mid", publish_date="2024-02-01T00:00:00Z")

    for query in (None, "", "   "):
        assert [item.title for item in filter_and_sort([old, new, mid], query)] == ["new", "mid", "old"]


def test_query_matches_any_text_field_case_insensitively(make_item):
    by_title = make_item(title="Electric AUDI unveiled")
    by_description = make_item(description="a new audi model")
    by_content = make_item(content="<p>Audi quarterly results</p>")
    by_source = make_item(source="Audi Newsroom")
    unrelated = make_item(title="Weather", description="Rain expected")

    results = filter_and_sort([by_title, by_description, by_content, by_source, unrelated], "  Audi ")

    assert {item.id for item in results} == {by_title.id, by_description.id, by_content.id, by_source.id}


def test_no_match_for_ordinary_query_is_empty(make_item):
    assert filter_and_sort([make_item(title="Weather")], "volcano") == []


def test_regional_query_without_matches_uses_regional_catalog(make_item):
    pool = [make_item(title="Markets rally", description="Stocks closed higher")]

    results = filter_and_sort(pool, "Kenya")

    assert results
    assert all(item.id.startswith("kenya-mock-") for item in results)


def test_regional_query_with_matches_keeps_pool_items(make_item):
    match = make_item(title="Kenya signs trade deal")

    assert filter_and_sort([match, make_item(title="Other")], "kenya") == [match]


def test_equal_dates_keep_input_order(make_item):
    same = "2024-05-05T05:05:05+00:00"
    items = [make_item(title=f"t{n}", publish_date=same) for n in range(5)]

    assert filter_and_sort(items, "t") == items


def test_matches_query_expects_lowercased_term(make_item):
    item = make_item(title="Solar Power")

    assert matches_query(item, "solar")


def test_audi_search_word_count(make_item):
    a = make_item(title="Audi A", description=" ".join(["word"] * 10), publish_date="2024-01-03T00:00:00+00:00")
    b = make_item(title="Audi B", description=" ".join(["word"] * 12), publish_date="2024-01-02T00:00:00+00:00")
    c = make_item(title="Car C", description=" ".join(["word"] * 8), publish_date="2024-01-01T00:00:00+00:00")

    results = filter_and_sort([c, b, a], "audi")
    analytics = compute_analytics(results)

    assert results == [a, b]
    assert analytics.word_count == 22
    assert analytics.article_count == 2
