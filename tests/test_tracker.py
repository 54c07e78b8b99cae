import json
from datetime import date

from autoapply.models import APPLIED, FAILED, ApplicationRecord
from autoapply.tracker import day_log_path, get_records, record_application


def _record(pid, outcome=APPLIED, ts="2026-03-02T09:15:00+00:00", reason=None):
    return ApplicationRecord(posting_id=pid, timestamp=ts, outcome=outcome, reason=reason, title=f"Request {pid}")


def test_records_append_to_day_file(tmp_path):
    record_application(_record("a"), log_dir=tmp_path)
    path = record_application(_record("b", FAILED, reason="No apply button found on page"), log_dir=tmp_path)

    assert path == tmp_path / "applications-2026-03-02.json"
    entries = json.loads(path.read_text(encoding="utf-8"))
    assert [e["posting_id"] for e in entries] == ["a", "b"]
    assert entries[1]["outcome"] == "failed"
    assert entries[1]["reason"] == "No apply button found on page"


def test_each_day_gets_its_own_file(tmp_path):
    record_application(_record("a", ts="2026-03-02T23:59:00+00:00"), log_dir=tmp_path)
    record_application(_record("b", ts="2026-03-03T00:01:00+00:00"), log_dir=tmp_path)

    assert [e["posting_id"] for e in get_records(date(2026, 3, 2), tmp_path)] == ["a"]
    assert [e["posting_id"] for e in get_records(date(2026, 3, 3), tmp_path)] == ["b"]


def test_missing_day_reads_empty(tmp_path):
    assert get_records(date(2020, 1, 1), tmp_path) == []


def test_corrupt_day_file_is_replaced(tmp_path):
    path = day_log_path(date(2026, 3, 2), tmp_path)
    path.write_text("{not json", encoding="utf-8")

    record_application(_record("a"), log_dir=tmp_path)

    assert [e["posting_id"] for e in get_records(date(2026, 3, 2), tmp_path)] == ["a"]


def test_unwritable_dir_does_not_raise(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x")
    assert record_application(_record("a"), log_dir=blocker / "sub") is None
