"""Write rendered change plans to disk for review."""

from __future__ import annotations

import os
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING

from aedsync.domain.ports.plan_output import PlanOutputPaths, PlanWriter
from aedsync.domain.reconciliation.rendering import render_geojson, render_osc

if TYPE_CHECKING:
    from collections.abc import Iterator
    from typing import TextIO

    from aedsync.domain.plan import ChangePlan

log = getLogger(__name__)


@contextmanager
def atomic_writer(path: Path, *, encoding: str = "utf-8") -> Iterator[TextIO]:
    """Yield a temp file beside ``path`` that replaces it only once fully written and synced."""

    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding=encoding) as handle:
            yield handle
            handle.flush()
            os.fsync(handle.fileno())
        tmp_path.replace(path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise


def atomic_write_text(path: Path, text: str) -> None:
    with atomic_writer(path) as handle:
        handle.write(text)


@dataclass(slots=True, frozen=True)
class PlanFileWriter:
    osc_path: Path
    geojson_path: Path

    def __call__(self, plan: ChangePlan) -> PlanOutputPaths:
        atomic_write_text(self.osc_path, render_osc(plan))
        atomic_write_text(self.geojson_path, render_geojson(plan))
        log.debug(f"Wrote planned changes to {self.osc_path} and {self.geojson_path}")
        return PlanOutputPaths(osc_path=self.osc_path, geojson_path=self.geojson_path)


if TYPE_CHECKING:
    _writer_check: PlanWriter = PlanFileWriter(Path(), Path())
