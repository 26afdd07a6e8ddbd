import pytest

from labelscan.models.analysis import AnalysisRecord, RiskLevel
from labelscan.models.scan import ImagePart, ScanResult
from labelscan.services.history import InMemoryHistoryStore, SQLiteHistoryStore


def make_scan(verdict: str) -> ScanResult:
    record = AnalysisRecord(verdict=verdict, reasoning="because", risk_level=RiskLevel.SAFE)
    return ScanResult.from_record(record, ImagePart(data=b"img", media_type="image/png"))


@pytest.fixture(params=["memory", "sqlite"])
def store(request, tmp_path):
    if request.param == "memory":
        return InMemoryHistoryStore(max_entries=3)
    return SQLiteHistoryStore(tmp_path / "history.db", max_entries=3)


def test_most_recent_first(store):
    for verdict in ["a", "b", "c"]:
        store.append(make_scan(verdict))

    assert [s.verdict for s in store.list()] == ["c", "b", "a"]
    assert [s.verdict for s in store.list(limit=2)] == ["c", "b"]


def test_capped_at_max_entries(store):
    for verdict in ["a", "b", "c", "d", "e"]:
        store.append(make_scan(verdict))

    assert [s.verdict for s in store.list()] == ["e", "d", "c"]


def test_get_by_id(store):
    scan = make_scan("apple")
    store.append(scan)
    store.append(make_scan("pear"))

    found = store.get_by_id(scan.id)
    assert found == scan
    assert found.image_url == "data:image/png;base64,aW1n"
    assert store.get_by_id("missing") is None


def test_clear(store):
    store.append(make_scan("a"))
    store.clear()
    assert store.list() == []


def test_sqlite_histories_are_separated_by_key(tmp_path):
    db_path = tmp_path / "history.db"
    first = SQLiteHistoryStore(db_path, key="first")
    second = SQLiteHistoryStore(db_path, key="second")

    first.append(make_scan("a"))

    assert len(first.list()) == 1
    assert second.list() == []


def test_sqlite_history_persists(tmp_path):
    db_path = tmp_path / "history.db"
    SQLiteHistoryStore(db_path).append(make_scan("kept"))

    assert [s.verdict for s in SQLiteHistoryStore(db_path).list()] == ["kept"]


@pytest.mark.parametrize("limit, expected", [(None, 3), (-1, 3), (-5, 3), (0, 0), (2, 2), (10, 3)])
def test_limit_behaves_the_same_for_every_store(store, limit, expected):
    for verdict in ["a", "b", "c"]:
        store.append(make_scan(verdict))

    assert len(store.list(limit)) == expected
