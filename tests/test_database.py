import pytest
from sqlalchemy.exc import OperationalError

from intellisource.data_access import database as database_module
from intellisource.data_access.database import Database, StoreUnavailableError


def _flaky_ping(failures: int):
    calls = {"count": 0}

    def ping() -> None:
        calls["count"] += 1
        if calls["count"] <= failures:
            raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    return ping, calls


def test_connect_retries_with_exponential_backoff(monkeypatch: pytest.MonkeyPatch) -> None:
    delays: list[float] = []
    monkeypatch.setattr(database_module.time, "sleep", delays.append)

    db = Database("sqlite://")
    ping, calls = _flaky_ping(failures=2)
    monkeypatch.setattr(db, "ping", ping)

    db.connect(max_retries=5, base_delay=0.5)
    assert db.connected is True
    assert calls["count"] == 3
    assert delays == [0.5, 1.0]
    db.dispose()
    assert db.connected is False


def test_connect_gives_up_after_max_retries(monkeypatch: pytest.MonkeyPatch) -> None:
    delays: list[float] = []
    monkeypatch.setattr(database_module.time, "sleep", delays.append)

    db = Database("sqlite://")
    ping, calls = _flaky_ping(failures=100)
    monkeypatch.setattr(db, "ping", ping)

    with pytest.raises(StoreUnavailableError):
        db.connect(max_retries=3, base_delay=0.25)
    assert calls["count"] == 3
    assert delays == [0.25, 0.5]
    assert db.status() == {"state": "disconnected", "ping": None}
