"""Asynchronous project file reader.

Reading a user-supplied file is the only asynchronous edge of the core: the
read happens on an executor and its result re-enters the synchronous
parse/validate/load pipeline through a callback.

A second read started before the first completes is neither cancelled nor
serialised; whichever finishes last wins.
"""

from collections.abc import Callable
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from pathlib import Path

from ..builder_logging import LogCategory, get_category_logger
from ..errors import ReadError

logger = get_category_logger(LogCategory.STORAGE)

OnLoaded = Callable[[str], None]
OnError = Callable[[ReadError], None]


class ProjectFileReader:
    """Reads project files as text off the calling thread."""

    def __init__(self, executor: Executor | None = None, encoding: str = "utf-8"):
        """Initialize the reader.

        Args:
            executor: Executor running the reads. A single worker thread pool
                is created when omitted.
            encoding: Text encoding of project files.
        """
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="tailui-reader"
        )
        self.encoding = encoding

    def read_text(self, path: Path | str) -> str:
        """Read ``path`` synchronously, raising ``ReadError`` on failure."""
        try:
            return Path(path).read_text(encoding=self.encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise ReadError(str(path), original_error=str(e)) from e

    def read(
        self,
        path: Path | str,
        on_loaded: OnLoaded,
        on_error: OnError | None = None,
    ) -> Future:
        """Start reading ``path`` and return immediately.

        Args:
            path: File to read.
            on_loaded: Called with the file text once the read succeeds.
            on_error: Called with a ``ReadError`` if the read fails.

        Returns:
            Future of the read, resolved after the callback has run.
        """

        def task() -> None:
            try:
                text = self.read_text(path)
            except ReadError as e:
                logger.warning(e.message)
                if on_error is not None:
                    on_error(e)
                return
            on_loaded(text)

        logger.debug(f"Reading project file {path}")
        return self._executor.submit(task)

    def close(self) -> None:
        """Shut down the executor if this reader created it."""
        if self._owns_executor:
            self._executor.shutdown(wait=True)
