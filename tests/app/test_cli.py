from __future__ import annotations

from datetime import timedelta
from pathlib import Path
from types import SimpleNamespace

import pytest

from aedsync.domain.ports.plan_output import PlanOutputPaths
from aedsync.ui import cli as cli_module


@pytest.fixture
def captured_reconcile(monkeypatch: pytest.MonkeyPatch) -> dict[str, object]:
    captured: dict[str, object] = {}

    def fake_reconcile(**kwargs: object) -> SimpleNamespace:
        captured.update(kwargs)
        return SimpleNamespace(
            output_paths=PlanOutputPaths(
                osc_path=Path("changes.osc"), geojson_path=Path("changes.geojson")
            )
        )

    monkeypatch.setattr(cli_module, "reconcile", fake_reconcile)
    return captured


def test_reconcile_defaults_leave_mode_to_config(captured_reconcile: dict[str, object]) -> None:
    cli_module.main(["reconcile"])

    assert captured_reconcile == {
        "live": None,
        "osc_path": None,
        "geojson_path": None,
        "max_delete_fraction": None,
    }


def test_reconcile_flags(captured_reconcile: dict[str, object]) -> None:
    cli_module.main(
        [
            "-v",
            "reconcile",
            "--live",
            "--osc",
            "out/plan.osc",
            "--geojson",
            "out/plan.geojson",
            "--max-delete-fraction",
            "0.25",
        ]
    )

    assert captured_reconcile["live"] is True
    assert captured_reconcile["osc_path"] == Path("out/plan.osc")
    assert captured_reconcile["geojson_path"] == Path("out/plan.geojson")
    assert captured_reconcile["max_delete_fraction"] == 0.25


def test_dry_run_flag_forces_dry_run(captured_reconcile: dict[str, object]) -> None:
    cli_module.main(["reconcile", "--dry-run"])

    assert captured_reconcile["live"] is False


def test_live_and_dry_run_are_exclusive(captured_reconcile: dict[str, object]) -> None:
    with pytest.raises(SystemExit) as exc:
        cli_module.main(["reconcile", "--live", "--dry-run"])

    assert exc.value.code == 2
    assert captured_reconcile == {}


def test_invalid_delete_fraction_exits_with_usage_error(
    captured_reconcile: dict[str, object],
) -> None:
    with pytest.raises(SystemExit) as exc:
        cli_module.main(["reconcile", "--max-delete-fraction", "1.5"])

    assert exc.value.code == 2
    assert captured_reconcile == {}


def test_reconcile_failure_exits_with_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def failing_reconcile(**_: object) -> None:
        raise RuntimeError("registry unavailable")

    monkeypatch.setattr(cli_module, "reconcile", failing_reconcile)

    with pytest.raises(SystemExit) as exc:
        cli_module.main(["reconcile"])

    assert exc.value.code == 1


def test_cleanup_converts_units(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_cleanup(**kwargs: object) -> None:
        captured.update(kwargs)

    monkeypatch.setattr(cli_module, "cleanup_runs", fake_cleanup)

    cli_module.main(["cleanup", "--stuck-hours", "1.5", "--retention-days", "14"])

    assert captured == {
        "stuck_timeout": timedelta(minutes=90),
        "retention": timedelta(days=14),
    }


def test_cleanup_defaults_to_config(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_cleanup(**kwargs: object) -> None:
        captured.update(kwargs)

    monkeypatch.setattr(cli_module, "cleanup_runs", fake_cleanup)

    cli_module.main(["cleanup"])

    assert captured == {"stuck_timeout": None, "retention": None}


@pytest.mark.parametrize("flag", ["--stuck-hours", "--retention-days"])
def test_cleanup_rejects_non_positive_values(monkeypatch: pytest.MonkeyPatch, flag: str) -> None:
    def fake_cleanup(**_: object) -> None:
        pytest.fail("cleanup must not run")

    monkeypatch.setattr(cli_module, "cleanup_runs", fake_cleanup)

    with pytest.raises(SystemExit) as exc:
        cli_module.main(["cleanup", flag, "0"])

    assert exc.value.code == 2


def test_missing_command_is_a_usage_error() -> None:
    with pytest.raises(SystemExit) as exc:
        cli_module.main([])

    assert exc.value.code == 2
