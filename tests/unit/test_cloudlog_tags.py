import pytest

from cloudlog_pump.pumps.cloudlog_pump import apply_cloudlog_keys, apply_header_keys


def _extract(tags):
    document = {}
    apply_cloudlog_keys(tags, document)
    apply_header_keys(tags, document)
    return document


def test_structured_tag_sets_arbitrary_key():
    assert _extract(["engine-cloudlog::foo::bar"]) == {"foo": "bar"}


@pytest.mark.parametrize(
    "tag",
    [
        "engine-cloudlog::foo",
        "engine-cloudlog::foo::bar::baz",
        "other-engine::foo::bar",
        "ENGINE-CLOUDLOG::foo::bar",
    ],
)
def test_structured_tag_requires_exact_shape(tag):
    assert _extract([tag]) == {}


@pytest.mark.parametrize(
    "tag, field, value",
    [
        ("x-origin-path-/v1/test", "origin_path", "/v1/test"),
        ("x-origin-method-PATCH", "origin_method", "PATCH"),
        ("accept-language-en-US", "accept_language", "en-US"),
        ("accept-text/html", "accept", "text/html"),
        ("content-type-application/json", "content_type", "application/json"),
        ("referer-https://example.com/page", "referer", "https://example.com/page"),
        ("origin-https://example.com", "origin", "https://example.com"),
    ],
)
def test_header_tags_map_to_fields(tag, field, value):
    assert _extract([tag]) == {field: value}


def test_accept_language_does_not_set_accept():
    document = _extract(["accept-language-en-US"])

    assert document["accept_language"] == "en-US"
    assert "accept" not in document


def test_x_origin_tags_do_not_set_origin():
    document = _extract(["x-origin-path-/a", "x-origin-method-GET"])

    assert "origin" not in document


def test_later_tag_wins_for_same_field():
    document = _extract(["origin-https://first.test", "origin-https://second.test"])

    assert document["origin"] == "https://second.test"


def test_later_structured_tag_wins_for_same_key():
    document = _extract(["engine-cloudlog::team::a", "engine-cloudlog::team::b"])

    assert document["team"] == "b"


def test_header_tag_overrides_structured_tag_for_same_field():
    document = _extract(["referer-header", "engine-cloudlog::referer::structured"])

    assert document["referer"] == "header"


def test_unrelated_tags_are_ignored():
    assert _extract(["key-abc", "quota-exceeded", ""]) == {}


def test_structured_tag_skips_reserved_keys():
    document = {"environment": "prod"}

    apply_cloudlog_keys(
        ["engine-cloudlog::environment::evil", "engine-cloudlog::team::a"],
        document,
        reserved=frozenset({"environment"}),
    )

    assert document == {"environment": "prod", "team": "a"}
