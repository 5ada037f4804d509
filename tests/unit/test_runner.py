"""
Unit tests for background pipeline runs.
"""

import threading
from datetime import datetime

import pytest

from sheetflow.batch import InMemorySink, InMemorySource, PipelineRunner, RecordPipeline
from sheetflow.core.errors import ContractError, PipelineBusyError
from sheetflow.core.models import Event, PipelineState
from sheetflow.core.profiles import EVENT_PROFILE

NOW = datetime(2026, 3, 2, 10, 0, 0)


class BlockingSource(InMemorySource):
    """Source that holds the read stage open until released"""

    def __init__(self, items=()):
        super().__init__(Event, items)
        self.started = threading.Event()
        self.release = threading.Event()

    def read_all(self):
        self.started.set()
        self.release.wait(timeout=10)
        return super().read_all()


class ContractBreakingSource(InMemorySource):
    def read_all(self):
        raise ContractError("broken")


@pytest.fixture
def runner():
    with PipelineRunner(RecordPipeline(EVENT_PROFILE, clock=lambda: NOW)) as runner:
        yield runner


class TestPipelineRunner:
    """Tests for PipelineRunner"""

    def test_submit_returns_report(self, runner, valid_event):
        """Test a background run resolves to its RunReport"""
        sink = InMemorySink()

        report = runner.submit(InMemorySource(Event, [valid_event]), sink).result(timeout=10)

        assert report.state == PipelineState.DONE
        assert report.valid == 1
        assert sink.records == [valid_event]
        assert not runner.is_busy

    def test_second_submit_while_busy(self, runner):
        """Test a second run is refused while the first is active"""
        source = BlockingSource()
        future = runner.submit(source, InMemorySink())
        assert source.started.wait(timeout=10)

        assert runner.is_busy
        with pytest.raises(PipelineBusyError):
            runner.submit(InMemorySource(Event, []), InMemorySink())

        source.release.set()
        assert future.result(timeout=10).state == PipelineState.DONE

    def test_submit_after_completion(self, runner):
        """Test a new run can start once the previous one finished"""
        runner.submit(InMemorySource(Event, []), InMemorySink()).result(timeout=10)

        report = runner.submit(InMemorySource(Event, []), InMemorySink()).result(timeout=10)

        assert report.state == PipelineState.DONE

    def test_cancel_between_stages(self, runner, valid_event):
        """Test cancel takes effect once the running stage completes"""
        source = BlockingSource([valid_event])
        sink = InMemorySink()
        future = runner.submit(source, sink)
        assert source.started.wait(timeout=10)

        runner.cancel()
        source.release.set()
        report = future.result(timeout=10)

        assert report.state == PipelineState.CANCELLED
        assert report.read == 1
        assert sink.write_calls == 0

    def test_cancel_flag_cleared_on_submit(self, runner):
        """Test a cancel request does not leak into the next run"""
        runner.cancel()

        report = runner.submit(InMemorySource(Event, []), InMemorySink()).result(timeout=10)

        assert report.state == PipelineState.DONE

    def test_contract_error_surfaces_through_future(self, runner):
        """Test contract errors are raised by Future.result"""
        future = runner.submit(ContractBreakingSource(Event, []), InMemorySink())

        with pytest.raises(ContractError):
            future.result(timeout=10)
