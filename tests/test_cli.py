"""Tests for the schema-diff command line interface.

Catalog readers are replaced with in-memory fakes, so the commands run
end to end without a database.
"""

import argparse
from pathlib import Path
from unittest.mock import patch

import pytest

from fakes import FakeCatalogReader, col, obj
from schema_diff.cli import (
    EXIT_DIFFERENCES,
    EXIT_ERROR,
    EXIT_OK,
    _merge_settings,
    build_parser,
    main,
)
from schema_diff.config.models import CompareSettings
from schema_diff.errors import CatalogConnectionError
from schema_diff.factory import ProfileNotFoundError
from schema_diff.schema.report import COLUMNS_TITLE, MISSING_TITLE


def _readers(local: FakeCatalogReader, remote: FakeCatalogReader):
    def get_reader(target, label, config=None, pool_size=8):
        return local if label == "local" else remote

    return get_reader


def _diverging() -> tuple[FakeCatalogReader, FakeCatalogReader]:
    local = FakeCatalogReader("local", [obj("T_A")], [col("T_A", "ID", "DATE")])
    remote = FakeCatalogReader(
        "remote", [obj("T_A"), obj("T_B")], [col("T_A", "ID", "NUMBER(1,0)")]
    )
    return local, remote


@pytest.fixture(autouse=True)
def _no_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run every command from an empty directory so no db.toml is picked up."""
    monkeypatch.chdir(tmp_path)


# ============================================================================
# Test: Argument parsing
# ============================================================================


class TestParser:
    def test_compare_defaults(self) -> None:
        args = build_parser().parse_args(["compare", "dev", "prod"])

        assert args.local == "dev"
        assert args.remote == "prod"
        assert args.types is None
        assert args.pattern is None
        assert not args.text
        assert not args.fail_on_diff

    def test_repeatable_type(self) -> None:
        args = build_parser().parse_args(
            ["compare", "a", "b", "--type", "TABLE", "--type", "SEQUENCE"]
        )

        assert args.types == ["TABLE", "SEQUENCE"]

    def test_command_required(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestMergeSettings:
    def _args(self, *argv: str) -> argparse.Namespace:
        return build_parser().parse_args(["compare", "a", "b", *argv])

    def test_no_overrides(self) -> None:
        settings = CompareSettings(pattern="^X_", timeout=5)

        assert _merge_settings(settings, self._args()) == settings

    def test_overrides(self) -> None:
        merged = _merge_settings(
            CompareSettings(),
            self._args(
                "--type", "table", "--pattern", "", "--text", "--bulk-columns",
                "--max-concurrency", "2", "--timeout", "9.5",
            ),
        )

        assert merged.object_types == ["table"]
        assert merged.pattern == ""
        assert merged.mode == "text"
        assert merged.column_strategy == "bulk"
        assert merged.max_concurrency == 2
        assert merged.timeout == 9.5

    def test_invalid_override_rejected(self) -> None:
        with pytest.raises(ValueError):
            _merge_settings(CompareSettings(), self._args("--max-concurrency", "0"))


# ============================================================================
# Test: compare command
# ============================================================================


class TestCompareCommand:
    def test_matching_schemas(self, capsys: pytest.CaptureFixture[str]) -> None:
        local = FakeCatalogReader("local", [obj("T_A")], [col("T_A", "ID", "DATE")])
        remote = FakeCatalogReader("remote", [obj("T_A")], [col("T_A", "ID", "DATE")])

        with patch("schema_diff.cli.get_reader", side_effect=_readers(local, remote)):
            code = main(["compare", "dev", "prod", "--fail-on-diff"])

        assert code == EXIT_OK
        out = capsys.readouterr().out
        assert MISSING_TITLE in out
        assert COLUMNS_TITLE in out
        assert local.closed and remote.closed

    def test_differences_without_flag(self, capsys: pytest.CaptureFixture[str]) -> None:
        local, remote = _diverging()

        with patch("schema_diff.cli.get_reader", side_effect=_readers(local, remote)):
            code = main(["compare", "dev", "prod"])

        assert code == EXIT_OK
        out = capsys.readouterr().out
        assert "T_B TABLE\n" in out
        assert "ALTER TABLE T_A MODIFY ID NUMBER(1,0); --DATE\n" in out

    def test_differences_with_flag(self) -> None:
        local, remote = _diverging()

        with patch("schema_diff.cli.get_reader", side_effect=_readers(local, remote)):
            code = main(["compare", "dev", "prod", "--fail-on-diff"])

        assert code == EXIT_DIFFERENCES

    def test_text_mode_to_file(self, tmp_path: Path) -> None:
        local, remote = _diverging()
        output = tmp_path / "drift.txt"

        with patch("schema_diff.cli.get_reader", side_effect=_readers(local, remote)):
            code = main(["compare", "dev", "prod", "--text", "-o", str(output)])

        assert code == EXIT_OK
        report = output.read_text()
        assert "-- T_A\n-ID NUMBER(1,0)\n+ID DATE\n" in report

    def test_catalog_failure(self, capsys: pytest.CaptureFixture[str]) -> None:
        local = FakeCatalogReader("local")
        remote = FakeCatalogReader(
            "remote", failures={"objects": CatalogConnectionError("remote", "refused")}
        )

        with patch("schema_diff.cli.get_reader", side_effect=_readers(local, remote)):
            code = main(["compare", "dev", "prod"])

        assert code == EXIT_ERROR
        assert capsys.readouterr().out == ""
        assert local.closed and remote.closed

    def test_close_failure_keeps_result(self) -> None:
        local, remote = _diverging()
        local.close_failure = OSError("dispose failed")

        with patch("schema_diff.cli.get_reader", side_effect=_readers(local, remote)):
            code = main(["compare", "dev", "prod", "--fail-on-diff"])

        assert code == EXIT_DIFFERENCES
        assert remote.closed

    def test_close_failure_keeps_catalog_error(self) -> None:
        local = FakeCatalogReader("local", close_failure=OSError("dispose failed"))
        remote = FakeCatalogReader(
            "remote", failures={"objects": CatalogConnectionError("remote", "refused")}
        )

        with patch("schema_diff.cli.get_reader", side_effect=_readers(local, remote)):
            code = main(["compare", "dev", "prod"])

        assert code == EXIT_ERROR
        assert remote.closed

    def test_timeout(self) -> None:
        local = FakeCatalogReader("local", delays={"objects": 5})
        remote = FakeCatalogReader("remote")

        with patch("schema_diff.cli.get_reader", side_effect=_readers(local, remote)):
            code = main(["compare", "dev", "prod", "--timeout", "0.1"])

        assert code == EXIT_ERROR
        assert local.cancelled == ["objects"]

    def test_unknown_profile(self) -> None:
        with patch(
            "schema_diff.cli.get_reader", side_effect=ProfileNotFoundError("no such profile")
        ):
            assert main(["compare", "dev", "prod"]) == EXIT_ERROR

    def test_missing_explicit_config(self, tmp_path: Path) -> None:
        code = main(["--config", str(tmp_path / "missing.toml"), "compare", "a", "b"])

        assert code == EXIT_ERROR

    def test_config_settings_used(self, tmp_path: Path) -> None:
        (tmp_path / "db.toml").write_text('[compare]\nobject_types = ["SEQUENCE"]\n')
        local = FakeCatalogReader("local", [obj("T_A"), obj("R_SEQ", "SEQUENCE")])
        remote = FakeCatalogReader("remote")
        output = tmp_path / "report.txt"

        with patch("schema_diff.cli.get_reader", side_effect=_readers(local, remote)):
            main(["compare", "dev", "prod", "-o", str(output)])

        report = output.read_text()
        assert "R_SEQ SEQUENCE" in report
        assert "T_A TABLE" not in report


# ============================================================================
# Test: profiles command
# ============================================================================


class TestProfilesCommand:
    def test_lists_profiles(self, tmp_path: Path) -> None:
        (tmp_path / "db.toml").write_text(
            '[profiles.dev]\nurl = "oracle://h/ORCL"\ndescription = "Development"\n'
        )

        with patch("schema_diff.cli.console") as mock_console:
            code = main(["profiles"])

        assert code == EXIT_OK
        table = mock_console.print.call_args[0][0]
        assert table.title == "Database Profiles"
        assert table.row_count == 1

    def test_no_profiles(self) -> None:
        assert main(["profiles"]) == EXIT_OK
