import signal
import threading

import pytest

from autoapply import bot
from autoapply.config import Credentials, Settings
from autoapply.errors import AuthFailure

CREDS = Credentials("me@example.com", "s3cret")


class FakeSession:
    instances = []

    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.closed = False
        self.page = None
        FakeSession.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.closed = True

    def screenshot(self, name):
        pass


@pytest.fixture(autouse=True)
def fake_browser(monkeypatch):
    FakeSession.instances = []
    monkeypatch.setattr(bot, "BrowserSession", FakeSession)
    for key in ("RUN_HEADLESS", "SLOW_MO_MS", "DRY_RUN", "DEBUG_SCREENSHOTS"):
        monkeypatch.delenv(key, raising=False)


def test_missing_credentials_exits_without_browser(monkeypatch):
    monkeypatch.delenv("CODEMENTOR_EMAIL", raising=False)
    monkeypatch.delenv("CODEMENTOR_PASSWORD", raising=False)

    assert bot.run(Settings(), stop=threading.Event()) == 1
    assert FakeSession.instances == []


def test_auth_failure_is_fatal_and_closes_session(monkeypatch):
    def failing_login(session, credentials):
        raise AuthFailure("Login failed: Timeout 30000ms exceeded.")

    monkeypatch.setattr(bot, "login", failing_login)

    assert bot.run(Settings(), credentials=CREDS, stop=threading.Event()) == 1
    assert FakeSession.instances[0].closed is True


def test_stopped_run_closes_session(monkeypatch):
    monkeypatch.setattr(bot, "login", lambda session, credentials: session)
    stop = threading.Event()
    stop.set()

    assert bot.run(Settings(), credentials=CREDS, stop=stop) == 0
    session = FakeSession.instances[0]
    assert session.closed is True
    assert session.kwargs["headless"] is True


def test_crash_inside_loop_still_closes_session(monkeypatch):
    monkeypatch.setattr(bot, "login", lambda session, credentials: session)

    class Exploding:
        def __init__(self, *args, **kwargs):
            pass

        def run(self):
            raise KeyboardInterrupt

    monkeypatch.setattr(bot, "PolicyLoop", Exploding)

    with pytest.raises(KeyboardInterrupt):
        bot.run(Settings(), credentials=CREDS, stop=threading.Event())
    assert FakeSession.instances[0].closed is True


def test_bad_slow_mo_is_config_error(monkeypatch):
    monkeypatch.setenv("SLOW_MO_MS", "fast")
    assert bot.run(Settings(), credentials=CREDS, stop=threading.Event()) == 2


def test_signal_handler_sets_stop():
    previous = {sig: signal.getsignal(sig) for sig in (signal.SIGINT, signal.SIGTERM)}
    stop = threading.Event()
    try:
        bot.install_signal_handlers(stop)
        signal.getsignal(signal.SIGTERM)(signal.SIGTERM, None)
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)
    assert stop.is_set()
