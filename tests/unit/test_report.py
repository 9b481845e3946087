from unittest.mock import patch

from sandbox_sync.sync.report import SyncReport


class TestSyncReport:
    def test_defaults(self) -> None:
        report = SyncReport(command="sync")
        assert report.total_rows == 0
        assert report.constraints_skipped == []
        assert report.failed_tables == []

    def test_records_skips_and_failures(self) -> None:
        report = SyncReport(command="sync")
        report.skip_constraint("member", "member_user_fk", "missing")
        report.fail_table("team", "boom")
        assert report.constraints_skipped[0].table == "member"
        assert report.failed_tables[0].reason == "boom"

    def test_total_rows(self) -> None:
        report = SyncReport(command="sync", rows_inserted={"a": 2, "b": 3})
        assert report.total_rows == 5

    def test_summary_logs_each_skipped_constraint(self) -> None:
        report = SyncReport(command="setup")
        report.skip_constraint("member", "member_user_fk", "missing")
        report.skip_constraint("team_member", "team_member_user_fk", "missing")
        with patch("sandbox_sync.sync.report.Log") as mock_log:
            report.log_summary()
        assert mock_log.warning.call_count == 2
