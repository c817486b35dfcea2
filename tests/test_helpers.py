"""Tests for the small helpers: JSON, hashing, timestamps, sleep."""
import asyncio
import re

import orjson
import pytest

from bilive_tools.utils.helpers import OMIT, SLEEP_SENTINEL, hash_hex, loads_json, now_string, sleep


def test_hash_known_digests():
    assert hash_hex("sha256", "") == "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
    assert hash_hex("md5", "abc") == "900150983cd24fb0d6963f7d28e17f72"
    assert hash_hex("md5", b"abc") == hash_hex("md5", "abc")


def test_hash_unknown_algorithm_raises():
    with pytest.raises(ValueError):
        hash_hex("not-a-hash", "data")


def test_now_string_is_fixed_width():
    value = now_string()
    assert len(value) == 19
    assert re.match(r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}$", value)


def test_loads_json_strict():
    assert loads_json('{"a":1}') == {"a": 1}
    with pytest.raises(orjson.JSONDecodeError):
        loads_json("not json")
    with pytest.raises(orjson.JSONDecodeError):
        loads_json("{'a': 1}")


def test_reviver_runs_bottom_up():
    calls = []

    def reviver(key, value):
        calls.append(key)
        if isinstance(value, int):
            return value * 2
        return value

    result = loads_json('{"a": 1, "b": [1, 2]}', reviver)
    assert result == {"a": 2, "b": [2, 4]}
    assert calls == ["a", 0, 1, "b", ""]


def test_reviver_omit_removes_keys():
    def reviver(key, value):
        return OMIT if key == "secret" else value

    assert loads_json('{"secret": "x", "keep": 1}', reviver) == {"keep": 1}


@pytest.mark.asyncio
async def test_sleep_returns_sentinel():
    assert await sleep(1) == SLEEP_SENTINEL == "sleep"


@pytest.mark.asyncio
async def test_sleep_zero_lets_queued_work_run_first():
    order = []

    async def other():
        order.append("other")

    task = asyncio.ensure_future(other())
    result = await sleep(0)
    order.append("after sleep")
    await task

    assert result == "sleep"
    assert order == ["other", "after sleep"]
