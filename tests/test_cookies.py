"""Tests for building and reading cookie jars."""
import httpx

from bilive_tools.services.cookies import cookie_header_for, get_cookie, set_cookie


def test_empty_string_gives_empty_jar():
    jar = set_cookie("")
    assert isinstance(jar, httpx.Cookies)
    assert len(jar) == 0


def test_pairs_are_scoped_to_bilibili():
    jar = set_cookie("DedeUserID=1234; SESSDATA=abc%2C123; bili_jct=xyz")
    assert get_cookie(jar, "DedeUserID") == "1234"
    assert get_cookie(jar, "SESSDATA") == "abc%2C123"
    assert get_cookie(jar, "bili_jct") == "xyz"

    for cookie in jar.jar:
        assert cookie.domain == ".bilibili.com"
        assert cookie.path == "/"


def test_missing_key_returns_empty_string():
    jar = set_cookie("a=1")
    assert get_cookie(jar, "b") == ""
    assert get_cookie(jar, "A") == ""


def test_cookies_not_visible_for_other_sites():
    jar = set_cookie("a=1")
    assert get_cookie(jar, "a", "https://example.com") == ""
    assert cookie_header_for(jar, "https://example.com/") == ""


def test_cookie_visible_on_subdomains():
    jar = set_cookie("a=1; b=2")
    assert get_cookie(jar, "b", "https://live.bilibili.com/23058") == "2"
    header = cookie_header_for(jar, "https://api.live.bilibili.com/")
    assert sorted(header.split("; ")) == ["a=1", "b=2"]


def test_each_call_builds_a_new_jar():
    first = set_cookie("a=1")
    second = set_cookie("a=2")
    assert first is not second
    assert get_cookie(first, "a") == "1"
    assert get_cookie(second, "a") == "2"
