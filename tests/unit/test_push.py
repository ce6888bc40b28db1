"""Unit tests for the ntfy push notifier."""

import httpx
import pytest

from limit_alarm.alerts import PushNotifier


def make_notifier(handler) -> PushNotifier:
    return PushNotifier(
        topic="my-alarm",
        base_url="https://ntfy.example/",
        transport=httpx.MockTransport(handler),
    )


class TestPushNotifier:
    """Tests for PushNotifier."""

    def test_unavailable_without_topic(self) -> None:
        """No topic configured means push is off."""
        notifier = PushNotifier()
        assert notifier.is_available is False
        assert notifier.url is None
        assert notifier.send("hello") is False

    def test_topic_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """CLAUDE_ALARM_NTFY_TOPIC enables push."""
        monkeypatch.setenv("CLAUDE_ALARM_NTFY_TOPIC", "from-env")
        notifier = PushNotifier()
        assert notifier.is_available is True
        assert notifier.url == "https://ntfy.sh/from-env"

    def test_send_posts_message(self) -> None:
        """The message is posted to the topic URL with a title."""
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={"id": "abc"})

        assert make_notifier(handler).send("Credits are back!") is True
        assert len(requests) == 1
        request = requests[0]
        assert request.method == "POST"
        assert str(request.url) == "https://ntfy.example/my-alarm"
        assert request.content == b"Credits are back!"
        assert request.headers["Title"] == "Claude Credits Renewed"

    def test_http_error_status(self) -> None:
        """A rejected post returns False."""
        notifier = make_notifier(lambda request: httpx.Response(403))
        assert notifier.send("msg") is False

    def test_connection_error(self) -> None:
        """Network failures return False instead of raising."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable", request=request)

        assert make_notifier(handler).send("msg") is False
