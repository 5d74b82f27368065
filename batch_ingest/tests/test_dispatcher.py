"""Unit tests for Dispatcher and its strategies."""

import asyncio
from pathlib import Path

import pytest

from batch_ingest.core.dispatch import (
    BoundedDispatchStrategy,
    Dispatcher,
    FileDescriptor,
    SequentialDispatchStrategy,
)


def descriptors(*paths: str):
    return [FileDescriptor(relative_path=p, destination=Path("/data/c") / p, size=1) for p in paths]


class Recorder:
    """Records callbacks and tracks downstream concurrency."""

    def __init__(self, delay: float = 0.01, fail=()):
        self.delay = delay
        self.fail = set(fail)
        self.events = []
        self.processed = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def process(self, file: FileDescriptor):
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            self.processed.append(file.relative_path)
            if file.relative_path in self.fail:
                raise RuntimeError(f"boom {file.relative_path}")
        finally:
            self.in_flight -= 1

    async def on_start(self, file: FileDescriptor):
        self.events.append(("start", file.relative_path))

    async def on_finish(self, file: FileDescriptor, error):
        self.events.append(("finish", file.relative_path, error))

    def callbacks(self):
        return {"process": self.process, "on_start": self.on_start, "on_finish": self.on_finish}


class TestDispatcherConcurrency:
    """Test the concurrency bound and exactly-once attempts."""

    @pytest.mark.asyncio
    async def test_never_exceeds_limit(self):
        """Test ten files with limit 3 never run more than 3 at once."""
        recorder = Recorder()
        files = descriptors(*[f"f{i}.txt" for i in range(10)])

        result = await Dispatcher().run(files, 3, **recorder.callbacks())

        assert recorder.max_in_flight == 3
        assert result.total_files == 10
        assert result.successful == 10
        assert result.processing_mode == "bounded_concurrent"

    @pytest.mark.asyncio
    async def test_each_file_attempted_once(self):
        """Test every file is processed exactly once."""
        recorder = Recorder(delay=0)
        paths = [f"dir/f{i}.txt" for i in range(7)]

        await Dispatcher().run(descriptors(*paths), 2, **recorder.callbacks())

        assert sorted(recorder.processed) == sorted(paths)

    @pytest.mark.asyncio
    async def test_limit_one_is_sequential(self):
        """Test a limit of 1 uses the sequential strategy."""
        recorder = Recorder()

        result = await Dispatcher().run(descriptors("a", "b", "c"), 1, **recorder.callbacks())

        assert recorder.max_in_flight == 1
        assert result.processing_mode == "sequential"

    @pytest.mark.asyncio
    async def test_start_precedes_finish_per_file(self):
        """Test on_start always comes before on_finish for a file."""
        recorder = Recorder()

        await Dispatcher().run(descriptors("a", "b", "c", "d"), 2, **recorder.callbacks())

        for path in "abcd":
            start = recorder.events.index(("start", path))
            finish = recorder.events.index(("finish", path, None))
            assert start < finish

    @pytest.mark.asyncio
    async def test_same_path_never_in_flight_twice(self):
        """Test duplicate relative paths are serialized but both attempted."""
        active = set()
        overlaps = []
        attempts = []

        async def process(file):
            if file.relative_path in active:
                overlaps.append(file.relative_path)
            active.add(file.relative_path)
            await asyncio.sleep(0.01)
            active.discard(file.relative_path)
            attempts.append(file.relative_path)

        async def noop(*args):
            pass

        files = descriptors("docs/a.txt", "docs/a.txt", "docs/b.txt")
        result = await Dispatcher().run(files, 3, process=process, on_start=noop, on_finish=noop)

        assert overlaps == []
        assert sorted(attempts) == ["docs/a.txt", "docs/a.txt", "docs/b.txt"]
        assert result.total_files == 3

    @pytest.mark.asyncio
    async def test_empty_batch(self):
        """Test an empty file list completes immediately."""
        recorder = Recorder()

        result = await Dispatcher().run([], 2, **recorder.callbacks())

        assert result.total_files == 0
        assert result.status == "completed"
        assert recorder.events == []


class TestDispatcherErrors:
    """Test per-file error isolation and input validation."""

    @pytest.mark.asyncio
    async def test_failure_is_isolated(self):
        """Test one failing file does not stop its siblings."""
        recorder = Recorder(fail={"c"})

        result = await Dispatcher().run(descriptors("a", "b", "c", "d", "e"), 2, **recorder.callbacks())

        assert result.successful == 4
        assert result.failed == 1
        assert result.status == "completed_with_errors"
        assert result.failures == [{"file": "c", "error": "boom c"}]
        assert sorted(recorder.processed) == ["a", "b", "c", "d", "e"]

    @pytest.mark.asyncio
    async def test_finish_runs_after_failure(self):
        """Test on_finish receives the error of a failed call."""
        recorder = Recorder(fail={"b"})

        await Dispatcher().run(descriptors("a", "b"), 1, **recorder.callbacks())

        assert ("finish", "b", "boom b") in recorder.events
        assert ("finish", "a", None) in recorder.events

    @pytest.mark.asyncio
    async def test_error_without_message_uses_type_name(self):
        """Test bare exceptions still produce a readable error."""
        errors = []

        async def process(file):
            raise TimeoutError()

        async def on_start(file):
            pass

        async def on_finish(file, error):
            errors.append(error)

        await Dispatcher().run(descriptors("a"), 1, process=process, on_start=on_start, on_finish=on_finish)

        assert errors == ["TimeoutError"]

    @pytest.mark.asyncio
    async def test_callback_error_fails_run(self):
        """Test errors in callbacks are batch-level and propagate."""
        recorder = Recorder(delay=0)

        async def broken_finish(file, error):
            raise RuntimeError("ledger unavailable")

        with pytest.raises(RuntimeError, match="ledger unavailable"):
            await Dispatcher().run(
                descriptors("a", "b", "c"),
                2,
                process=recorder.process,
                on_start=recorder.on_start,
                on_finish=broken_finish,
            )

        # Siblings still settled before the error surfaced
        assert sorted(recorder.processed) == ["a", "b", "c"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("limit", [0, -1, 1.5, "3", True])
    async def test_invalid_limit_raises(self, limit):
        """Test malformed limits are rejected before dispatch."""
        recorder = Recorder()

        with pytest.raises(ValueError):
            await Dispatcher().run(descriptors("a"), limit, **recorder.callbacks())

        assert recorder.events == []

    @pytest.mark.asyncio
    async def test_malformed_file_list_raises(self):
        """Test non-descriptors are rejected before any file starts."""
        recorder = Recorder()
        files = descriptors("a") + ["not-a-descriptor"]

        with pytest.raises(ValueError, match="FileDescriptor"):
            await Dispatcher().run(files, 2, **recorder.callbacks())

        assert recorder.events == []

    @pytest.mark.asyncio
    async def test_empty_relative_path_raises(self):
        """Test descriptors need an identifier."""
        recorder = Recorder()

        with pytest.raises(ValueError, match="empty relative path"):
            await Dispatcher().run(descriptors(""), 2, **recorder.callbacks())


class TestStrategySelection:
    """Test strategy routing."""

    def test_sequential_for_limit_one(self):
        """Test limit 1 routes to the sequential strategy."""
        assert isinstance(Dispatcher()._select_strategy(10, 1), SequentialDispatchStrategy)

    def test_sequential_for_single_file(self):
        """Test a single file routes to the sequential strategy."""
        assert isinstance(Dispatcher()._select_strategy(1, 5), SequentialDispatchStrategy)

    def test_bounded_otherwise(self):
        """Test larger batches route to the bounded strategy."""
        assert isinstance(Dispatcher()._select_strategy(10, 3), BoundedDispatchStrategy)
