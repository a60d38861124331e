"""Unit tests for core.cors origin and preflight checks."""

from certgateway.core.cors import origin_is_allowed, preflight_failures

ALLOWED = ["http://localhost:3000", "https://capacitacion.cruzrojamexicana.org.mx"]


def test_missing_origin_allowed() -> None:
    assert origin_is_allowed(None, ALLOWED)
    assert origin_is_allowed("", ALLOWED)


def test_listed_origin_allowed() -> None:
    for origin in ALLOWED:
        assert origin_is_allowed(origin, ALLOWED)


def test_origin_compared_exactly() -> None:
    assert not origin_is_allowed("http://localhost:3000/", ALLOWED)
    assert not origin_is_allowed("HTTP://localhost:3000", ALLOWED)


def test_other_origins_rejected() -> None:
    assert not origin_is_allowed("https://evil.example", ALLOWED)
    assert not origin_is_allowed("http://localhost:3001", ALLOWED)
    assert not origin_is_allowed("null", ALLOWED)


def test_preflight_within_allow_list() -> None:
    assert preflight_failures("GET", None) == []
    assert preflight_failures("GET", "X-API-Key, content-type") == []
    assert preflight_failures("GET", "accept") == []


def test_preflight_outside_allow_list() -> None:
    assert preflight_failures("POST", None) == ["method"]
    assert preflight_failures("GET", "x-api-key, authorization") == ["headers"]
    assert preflight_failures("DELETE", "authorization") == ["method", "headers"]
