"""
Background execution of pipeline runs.
"""

import threading
from concurrent.futures import Future, ThreadPoolExecutor

from sheetflow.batch.pipeline import RecordPipeline
from sheetflow.batch.readers import RecordSource
from sheetflow.batch.writers import RecordSink
from sheetflow.core.errors import PipelineBusyError
from sheetflow.core.models import RunReport
from sheetflow.observability.logger import get_logger

logger = get_logger(__name__)


class PipelineRunner:
    """
    Runs a RecordPipeline on a single background worker thread.

    At most one run is active at a time. cancel() only takes effect between
    stages; a stage in progress always completes.

    Usage:
        with PipelineRunner(pipeline) as runner:
            report = runner.submit(source, sink).result()
    """

    def __init__(self, pipeline: RecordPipeline):
        self.pipeline = pipeline
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="sheetflow-run")
        self._lock = threading.Lock()
        self._current: Future | None = None

    @property
    def is_busy(self) -> bool:
        with self._lock:
            return self._current is not None and not self._current.done()

    def submit(self, source: RecordSource, sink: RecordSink) -> "Future[RunReport]":
        """
        Start a run in the background.

        Args:
            source: Record source
            sink: Record sink

        Returns:
            Future resolving to the RunReport (or raising a ContractError)

        Raises:
            PipelineBusyError: If a run is still active
        """
        with self._lock:
            if self._current is not None and not self._current.done():
                raise PipelineBusyError(f"A {self.pipeline.profile.name} run is already in progress")
            self.pipeline.cancel_event.clear()
            logger.info(f"Submitting {self.pipeline.profile.name} run")
            self._current = self._executor.submit(self.pipeline.run, source, sink)
            return self._current

    def cancel(self) -> None:
        """Request cancellation of the active run at the next stage boundary."""
        logger.info(f"Cancellation requested for {self.pipeline.profile.name} run")
        self.pipeline.cancel_event.set()

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "PipelineRunner":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.shutdown(wait=True)
        return False
