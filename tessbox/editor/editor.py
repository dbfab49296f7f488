"""Command dispatch and background work for interactive box editing.

`BoxEditor` is the seam between a user interface and the edit operations: the
interface sends an `EditCommand` together with the current page and
selection, and the editor runs the matching operation. End-of-line marking
runs in the background through `MarkEndOfLineJob`, and the editor refuses
other edits until it has finished.
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from enum import Enum

from loguru import logger

from tessbox.common.exceptions import EditorBusy
from tessbox.editor import operations
from tessbox.editor.segmenter import TesseractLineSegmenter


class EditCommand(str, Enum):
    MERGE = "merge"
    SPLIT = "split"
    INSERT = "insert"
    DELETE = "delete"
    MARK_EOL = "mark_eol"


class JobState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


def _call_directly(fn, *args):
    fn(*args)


class MarkEndOfLineJob:
    """Runs end-of-line marking on a worker thread.

    The job moves from `IDLE` to `RUNNING` when started, and to `SUCCEEDED`
    or `FAILED` when the work ends. Exactly one of the two callbacks is then
    invoked, through `notify`, after which the job is `IDLE` again. The
    future returned by `start` resolves only once the job is back to `IDLE`.
    The job cannot be cancelled once started.

    Attributes:
        segmenter (Callable[[Image.Image], list[Rect]]): The text-line
            segmenter.
        notify (Callable): Called as `notify(callback, arg)` to deliver a
            result. Pass something like `loop.call_soon_threadsafe` to run
            the callbacks on the interactive thread; by default they run on
            the worker thread.
        state (JobState): The current state.
        last_state (JobState | None): How the most recent run ended.
    """

    def __init__(self, segmenter, notify=None):
        self.segmenter = segmenter
        self.notify = notify if notify is not None else _call_directly
        self.state = JobState.IDLE
        self.last_state = None
        self._lock = threading.Lock()
        self._executor = ThreadPoolExecutor(max_workers=1)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.shutdown()

    @property
    def running(self):
        return self.state is JobState.RUNNING

    def start(self, box_pages, images, on_succeeded=None, on_failed=None):
        """Starts marking line ends on all pages.

        Args:
            box_pages (list[BoxCollection]): The boxes of each page; edited
                in place.
            images (list[Image.Image]): The page rasters.
            on_succeeded (Callable[[int], None], optional): Receives the
                number of markers inserted.
            on_failed (Callable[[BaseException], None], optional): Receives
                the error that stopped the job.

        Returns:
            concurrent.futures.Future: Resolves to the number of markers
            inserted.

        Raises:
            EditorBusy: If the job is already running.
            RuntimeError: If the job has been shut down.
        """
        with self._lock:
            if self.state is JobState.RUNNING:
                raise EditorBusy("End-of-line marking is already running.")
            self.state = JobState.RUNNING
        logger.info(f"Marking line ends on {len(images)} page(s)")
        try:
            return self._executor.submit(self._run, box_pages, images, on_succeeded, on_failed)
        except Exception:
            self.state = JobState.IDLE
            raise

    def _run(self, box_pages, images, on_succeeded, on_failed):
        try:
            inserted = operations.mark_end_of_line(box_pages, images, self.segmenter)
        except Exception as e:
            logger.error(f"End-of-line marking failed: {e}")
            self._finish(JobState.FAILED, on_failed, e)
            raise
        logger.info(f"Inserted {inserted} end-of-line marker(s)")
        self._finish(JobState.SUCCEEDED, on_succeeded, inserted)
        return inserted

    def _finish(self, state, callback, arg):
        self.state = state
        try:
            if callback is not None:
                self.notify(callback, arg)
        finally:
            self.last_state = state
            self.state = JobState.IDLE

    def shutdown(self, wait=True):
        self._executor.shutdown(wait=wait)


class BoxEditor:
    """Dispatches edit commands to the box collections of a document.

    Attributes:
        box_pages (list[BoxCollection]): The boxes of each page.
        images (list[Image.Image]): The page rasters, used for end-of-line
            marking.
        job (MarkEndOfLineJob): The background end-of-line marking job.
    """

    def __init__(self, box_pages, images=None, segmenter=None, notify=None):
        self.box_pages = box_pages
        self.images = list(images) if images is not None else []
        if segmenter is None:
            segmenter = TesseractLineSegmenter()
        self.job = MarkEndOfLineJob(segmenter, notify=notify)
        self._handlers = {
            EditCommand.MERGE: operations.merge,
            EditCommand.SPLIT: operations.split,
            EditCommand.INSERT: operations.insert,
            EditCommand.DELETE: operations.delete,
        }

    @property
    def busy(self):
        """True while end-of-line marking runs and editing is disabled."""
        return self.job.running

    def dispatch(self, command, page=0, selection=(), **kwargs):
        """Runs an edit command.

        Args:
            command (EditCommand | str): The command to run.
            page (int): The index of the page being edited.
            selection (Sequence[GlyphBox]): The selected boxes, in selection
                order.
            **kwargs: Passed on to the operation, e.g. `axis` for split or
                the callbacks for end-of-line marking.

        Returns:
            The operation's result: the position to select for the
            synchronous commands, a `Future` for `MARK_EOL`.

        Raises:
            EditorBusy: If end-of-line marking is running.
            InvalidSelection: If the selection does not suit the command.
        """
        command = EditCommand(command)
        if self.busy:
            raise EditorBusy("Please wait until end-of-line marking has finished.")
        if command is EditCommand.MARK_EOL:
            return self.job.start(self.box_pages, self.images, **kwargs)
        return self._handlers[command](self.box_pages[page], selection, **kwargs)

    def close(self):
        self.job.shutdown()
