import json
import logging

import httpx

from fleetwatch.services.notifier import MAX_MESSAGE_LENGTH, TelegramNotifier, split_message


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


def test_send_posts_text_to_chat():
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"ok": True})

    notifier = TelegramNotifier("123:abc", 42, client=_client(handler))

    assert notifier.send("Error: SSH command to server 1 timed out") is True

    assert len(requests) == 1
    request = requests[0]
    assert request.method == "POST"
    assert request.url.host == "api.telegram.org"
    assert request.url.path == "/bot123:abc/sendMessage"
    assert json.loads(request.content) == {
        "chat_id": 42,
        "text": "Error: SSH command to server 1 timed out",
    }


def test_rejected_message_is_logged_and_swallowed(caplog):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"ok": False, "description": "chat not found"})

    notifier = TelegramNotifier("123:abc", 42, client=_client(handler))

    with caplog.at_level(logging.WARNING):
        assert notifier.send("hello") is False

    assert "400" in caplog.text


def test_transport_error_is_swallowed_without_leaking_token(caplog):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    notifier = TelegramNotifier("123:secret", 42, client=_client(handler))

    with caplog.at_level(logging.WARNING):
        assert notifier.send("hello") is False

    assert "ConnectError" in caplog.text
    assert "secret" not in caplog.text


def test_unconfigured_notifier_drops_message():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    notifier = TelegramNotifier("", None, client=_client(handler))

    assert notifier.configured is False
    assert notifier.send("hello") is False


def test_token_with_newline_is_swallowed(caplog):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"ok": True})

    notifier = TelegramNotifier("123:abc\n", 42, client=_client(handler))

    with caplog.at_level(logging.WARNING):
        assert notifier.send("hello") is False

    assert "Failed to send Telegram message" in caplog.text


def test_send_after_close_is_swallowed():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"ok": True})

    notifier = TelegramNotifier("123:abc", 42, client=_client(handler))
    notifier.close()

    assert notifier.send("hello") is False


def test_long_message_is_sent_in_ordered_chunks():
    texts = []

    def handler(request: httpx.Request) -> httpx.Response:
        text = json.loads(request.content)["text"]
        if len(text) > MAX_MESSAGE_LENGTH:
            return httpx.Response(400, json={"ok": False, "description": "message is too long"})
        texts.append(text)
        return httpx.Response(200, json={"ok": True})

    notifier = TelegramNotifier("123:abc", 42, client=_client(handler))
    lines = [f"2026-10-19 12:00:{n:02d} ERROR worker {n} crashed: connection reset by peer" for n in range(200)]
    message = "New log entries detected on server controller@10.0.0.1:\n" + "\n".join(lines)
    assert len(message) > MAX_MESSAGE_LENGTH

    assert notifier.send(message) is True

    assert len(texts) > 1
    assert "\n".join(texts) == message


def test_split_message_keeps_short_text_whole():
    assert split_message("A\nB") == ["A\nB"]
    assert split_message("") == [""]


def test_split_message_cuts_overlong_line():
    chunks = split_message("x" * 10 + "\nok", limit=4)

    assert chunks == ["xxxx", "xxxx", "xx", "ok"]
    assert all(len(chunk) <= 4 for chunk in chunks)
