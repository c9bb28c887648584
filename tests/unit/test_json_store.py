"""
Tests for JSON file persistence

Covers save/load round trips, tolerant loading of missing, blank and corrupt
files, and backup path naming.
"""

import logging
from datetime import datetime, timezone

from utils.json_store import backup_path_for, load_from_json, save_to_json


class TestSaveToJson:
    """Test save_to_json"""

    def test_creates_missing_parent_directories(self, tmp_path):
        """Nested directories are created on first save"""
        target = tmp_path / "bot" / "results" / "jobs.json"

        save_to_json([{"name": "Stripe"}], target)

        assert target.exists()

    def test_writes_indented_json(self, tmp_path):
        """Output is pretty-printed with two-space indent"""
        target = tmp_path / "jobs.json"

        save_to_json([{"name": "Stripe"}], target)

        assert target.read_text(encoding="utf-8") == '[\n  {\n    "name": "Stripe"\n  }\n]'

    def test_overwrites_instead_of_appending(self, tmp_path):
        """Each save replaces the whole file"""
        target = tmp_path / "jobs.json"

        save_to_json([1, 2, 3], target)
        save_to_json([4], target)

        assert load_from_json(target) == [4]

    def test_leaves_no_temp_files(self, tmp_path):
        """The temp file used for the atomic replace is gone afterwards"""
        target = tmp_path / "jobs.json"

        save_to_json({"ok": True}, target)

        assert [p.name for p in tmp_path.iterdir()] == ["jobs.json"]

    def test_keeps_non_ascii_text(self, tmp_path):
        """Salary strings with currency symbols survive unescaped"""
        target = tmp_path / "jobs.json"

        save_to_json([{"salary": "£50K - €70K"}], target)

        assert "£50K - €70K" in target.read_text(encoding="utf-8")


class TestLoadFromJson:
    """Test load_from_json"""

    def test_round_trip(self, tmp_path):
        """load_from_json returns exactly what save_to_json wrote"""
        data = [
            {
                "id": 1,
                "name": "Stripe",
                "jobs": [{"title": "Engineer", "salary": "$150K", "equity": "0.1%"}],
                "scraped_at": "2024-06-01T00:00:00.000+00:00",
            },
            {"id": 2, "name": "Broken", "jobs": [], "error": "Timeout 30000ms exceeded"},
        ]
        target = tmp_path / "jobs.json"

        save_to_json(data, target)

        assert load_from_json(target) == data

    def test_missing_file_returns_none(self, tmp_path):
        assert load_from_json(tmp_path / "nope.json") is None

    def test_empty_file_returns_none(self, tmp_path):
        target = tmp_path / "jobs.json"
        target.write_text("")

        assert load_from_json(target) is None

    def test_whitespace_file_returns_none(self, tmp_path):
        target = tmp_path / "jobs.json"
        target.write_text("  \n\t\n")

        assert load_from_json(target) is None

    def test_malformed_json_returns_none_and_warns(self, tmp_path, caplog):
        """Corrupt content is treated as no data, never raised"""
        target = tmp_path / "jobs.json"
        target.write_text('[{"name": "Stripe",')

        with caplog.at_level(logging.WARNING):
            result = load_from_json(target)

        assert result is None
        assert "Failed to parse JSON" in caplog.text

    def test_undecodable_bytes_return_none_and_warn(self, tmp_path, caplog):
        """Bytes that are not UTF-8 count as corrupt, never raised"""
        target = tmp_path / "jobs.json"
        target.write_bytes(b'[{"name": "\xff\xfe"}]')

        with caplog.at_level(logging.WARNING):
            result = load_from_json(target)

        assert result is None
        assert "Failed to read" in caplog.text


class TestBackupPathFor:
    """Test backup_path_for"""

    def test_timestamped_path_under_backup_dir(self, tmp_path):
        now = datetime(2024, 6, 1, 12, 30, 5, 123000, tzinfo=timezone.utc)

        path = backup_path_for(tmp_path, now)

        assert path == tmp_path / "backup" / "jobs-2024-06-01T12-30-05.json"

    def test_timestamp_has_no_colons(self, tmp_path):
        path = backup_path_for(tmp_path)

        assert ":" not in path.name
        assert path.name.startswith("jobs-")

    def test_existing_backup_is_not_reused(self, tmp_path):
        """A second backup in the same second gets a suffix"""
        now = datetime(2024, 6, 1, 12, 30, 5, tzinfo=timezone.utc)
        first = backup_path_for(tmp_path, now)
        save_to_json([1], first)

        second = backup_path_for(tmp_path, now)

        assert second != first
        assert second.name == "jobs-2024-06-01T12-30-05-1.json"
