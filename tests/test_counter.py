"""Tests for termfolio.stores.counter: VisitorCounter."""

import json
from pathlib import Path

import pytest

from termfolio.stores.counter import VisitorCounter


class TestLoad:
    def test_missing_file_starts_at_zero(self, tmp_path: Path) -> None:
        counter = VisitorCounter(tmp_path / "visitors.json")
        assert counter.load() == 0

    def test_existing_count(self, tmp_path: Path) -> None:
        path = tmp_path / "visitors.json"
        path.write_text('{"count": 41}')
        assert VisitorCounter(path).load() == 41

    def test_integral_float_count_kept(self, tmp_path: Path) -> None:
        path = tmp_path / "visitors.json"
        path.write_text('{"count": 12.0}')
        counter = VisitorCounter(path)
        assert counter.load() == 12
        assert isinstance(counter.count, int)

    @pytest.mark.parametrize(
        "content",
        [
            "not json",
            "[]",
            '{"count": "7"}',
            '{"count": -2}',
            '{"count": true}',
            '{"count": 1.5}',
            "{}",
        ],
    )
    def test_unusable_state_starts_at_zero(
        self, tmp_path: Path, content: str, caplog: pytest.LogCaptureFixture
    ) -> None:
        path = tmp_path / "visitors.json"
        path.write_text(content)
        assert VisitorCounter(path).load() == 0
        assert caplog.records


class TestIncrement:
    async def test_first_visit_increments_and_persists(self, tmp_path: Path) -> None:
        path = tmp_path / "visitors.json"
        counter = VisitorCounter(path)
        counter.load()

        visit = counter.increment_if_first_visit(cookie_present=False)
        assert visit.first_visit
        assert visit.count == 1

        await counter.flush()
        assert json.loads(path.read_text()) == {"count": 1}

    async def test_returning_visitor_not_counted(self, tmp_path: Path) -> None:
        path = tmp_path / "visitors.json"
        path.write_text('{"count": 9}')
        counter = VisitorCounter(path)
        counter.load()

        visit = counter.increment_if_first_visit(cookie_present=True)
        assert not visit.first_visit
        assert visit.count == 9
        assert counter.pending_saves == 0

    async def test_burst_loses_no_increments(self, tmp_path: Path) -> None:
        path = tmp_path / "visitors.json"
        counter = VisitorCounter(path)
        counter.load()
        for _ in range(25):
            counter.increment_if_first_visit(cookie_present=False)
        assert counter.pending_saves == 1
        await counter.flush()
        assert counter.count == 25
        assert json.loads(path.read_text()) == {"count": 25}

    async def test_survives_restart(self, tmp_path: Path) -> None:
        path = tmp_path / "visitors.json"
        first = VisitorCounter(path)
        first.load()
        first.increment_if_first_visit(cookie_present=False)
        first.increment_if_first_visit(cookie_present=False)
        await first.flush()

        second = VisitorCounter(path)
        assert second.load() == 2
