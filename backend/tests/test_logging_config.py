# backend/tests/test_logging_config.py

import datetime as dt
import json

from bookit.core.logging_config import DataLogger, cleanup_old_logs, extract_user_data


def test_data_logger_appends_to_json_array(tmp_path):
    logger = DataLogger(str(tmp_path))
    logger.log_data("challenge_refresh", {"current": 3}, {"user_id": "user-1"})
    logger.log_data("challenge_refresh", {"when": dt.datetime(2024, 1, 8)})

    files = list(tmp_path.glob("*-data.json"))
    assert len(files) == 1
    entries = json.loads(files[0].read_text(encoding="utf-8"))
    assert [e["calling_context"] for e in entries] == ["challenge_refresh"] * 2
    assert entries[0]["user_data"] == {"user_id": "user-1"}
    assert entries[1]["data"]["when"] == "2024-01-08T00:00:00"


def test_cleanup_old_logs(tmp_path):
    old = tmp_path / "2000-01-01-data.json"
    recent = tmp_path / f"{dt.date.today().isoformat()}-data.json"
    old.write_text("[]")
    recent.write_text("[]")

    cleanup_old_logs(tmp_path, retention_days=30)

    assert not old.exists()
    assert recent.exists()


def test_extract_user_data():
    assert extract_user_data("user-1") == {"user_id": "user-1"}
    assert extract_user_data() == {}
