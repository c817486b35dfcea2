"""Tests for the RequestFacade surface, its lifecycle and the process lifespan."""
import httpx
import pytest

from bilive_tools import HookNotConfiguredError, RequestFacade
from bilive_tools.core.events import EVENT_LOG, EVENT_SYSTEM_MESSAGE, EventBus
from bilive_tools import main
from bilive_tools.main import configure_logging, lifespan


def ok_handler(request):
    return httpx.Response(200, json={"code": 0})


def make_facade(handler=ok_handler, events=None):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return RequestFacade(client, events=events), client


def test_system_message_is_logged():
    events = EventBus()
    facade, _ = make_facade(events=events)
    received = []
    events.on(EVENT_LOG, received.append)

    events.emit(EVENT_SYSTEM_MESSAGE, {"message": "直播间 23058 已开播"})

    assert len(facade.logs) == 1
    assert facade.logs[0].endswith(" : 直播间 23058 已开播")
    assert received == facade.logs


@pytest.mark.asyncio
async def test_aclose_unsubscribes_and_clears_logs():
    events = EventBus()
    facade, client = make_facade(events=events)
    facade.log("before close")
    assert events.listener_count(EVENT_SYSTEM_MESSAGE) == 1

    await facade.aclose()

    assert facade.logs == []
    assert events.listener_count(EVENT_SYSTEM_MESSAGE) == 0
    events.emit(EVENT_SYSTEM_MESSAGE, {"message": "ignored"})
    assert facade.logs == []
    # the client was passed in, so the facade leaves it open
    assert not client.is_closed
    await client.aclose()


@pytest.mark.asyncio
async def test_parse_json_success_and_failure():
    facade, client = make_facade()
    errors = []
    facade.sink.error = lambda *parts: errors.append(parts)

    assert await facade.parse_json('{"a":1}') == {"a": 1}
    assert errors == []

    assert await facade.parse_json("not json") is None
    assert len(errors) == 1
    assert errors[0][0] == "JSONparse"

    result = await facade.parse_json_result("[1,")
    assert not result.ok
    assert result.kind.value == "parse"
    await client.aclose()


@pytest.mark.asyncio
async def test_parse_json_valid_null_is_ok():
    facade, client = make_facade()
    result = await facade.parse_json_result("null")
    assert result.ok
    assert result.value is None
    await client.aclose()


@pytest.mark.asyncio
async def test_xhr_and_helpers():
    facade, client = make_facade()
    async with client:
        result = await facade.xhr({"uri": "https://api.live.bilibili.com/room/v1/Room/get_info", "json": True})
        assert result.body == {"code": 0}
        typed = await facade.xhr_result({"url": "https://api.live.bilibili.com/room/v1/Room/get_info"})
        assert typed.ok

    assert facade.hash("sha256", "") == "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
    assert len(facade.date()) == 19
    assert await facade.sleep(0) == "sleep"
    assert facade.get_headers("Android")["Connection"] == "Keep-Alive"

    jar = facade.set_cookie("bili_jct=token")
    assert facade.get_cookie(jar, "bili_jct") == "token"


def test_log_and_error_log(capsys):
    facade, _ = make_facade()
    facade.log("info line")
    facade.error_log("error line")
    captured = capsys.readouterr()
    assert "info line" in captured.out
    assert "error line" in captured.err
    assert len(facade.logs) == 1


@pytest.mark.asyncio
async def test_hooks_raise_until_configured():
    facade, client = make_facade()
    with pytest.raises(HookNotConfiguredError):
        facade.send_sc_msg("hi")
    with pytest.raises(HookNotConfiguredError):
        await facade.captcha("base64jpeg")

    sent = []
    facade.send_sc_msg_hook = sent.append

    async def solve(jpeg):
        return "ab12"

    facade.captcha_hook = solve
    facade.send_sc_msg("hi")
    assert sent == ["hi"]
    assert await facade.captcha("base64jpeg") == "ab12"
    await client.aclose()


@pytest.mark.asyncio
async def test_owned_client_is_closed_on_exit():
    async with RequestFacade() as facade:
        client = facade.client
        assert not client.is_closed
    assert client.is_closed


@pytest.mark.asyncio
async def test_lifespan_builds_and_closes_facade():
    async with lifespan(httpx.MockTransport(ok_handler)) as facade:
        result = await facade.xhr({"url": "https://api.live.bilibili.com/", "json": True})
        assert result.body == {"code": 0}
        client = facade.client
    assert client.is_closed


def test_configure_logging_is_idempotent():
    root = configure_logging("INFO")
    count = len(root.handlers)
    configure_logging("INFO")
    assert len(root.handlers) == count
    assert main._console_handler in root.handlers


def test_configure_logging_reinstalls_removed_handler():
    root = configure_logging("INFO")
    root.removeHandler(main._console_handler)
    configure_logging("INFO")
    assert root.handlers.count(main._console_handler) == 1
