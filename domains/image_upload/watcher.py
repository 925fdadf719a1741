"""
Inbox watcher for the Image Upload domain.

Uploads images that appear anywhere in the inbox tree after the watcher
has started. Files already present at subscription time are left to the
directory reconciler.

The watchdog observer runs in its own thread; every new image is handed
to the asyncio loop and uploaded from a task after a fixed delay so the
writer has a chance to finish flushing the file.
"""

import asyncio
from pathlib import Path
from typing import Callable, Optional, Set

from loguru import logger
from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from app.utils.helpers import is_hidden, is_image_file
from domains.image_upload.executor import UploadExecutor


class InboxEventHandler(FileSystemEventHandler):
    """Turns file-creation events into new-image notifications."""

    def __init__(self, directory: Path, on_new_image: Callable[[Path], None], log=logger):
        """
        Initialize event handler.

        Args:
            directory: Watched directory
            on_new_image: Called with the path of every new eligible image
            log: Logger used for event and error reporting
        """
        super().__init__()
        self.directory = Path(directory)
        self.on_new_image = on_new_image
        self.log = log

    def should_process(self, path: Path) -> bool:
        """Eligible images only; hidden files and files under hidden folders are ignored."""
        if path.is_relative_to(self.directory):
            parts = path.relative_to(self.directory).parts
        else:
            parts = (path.name,)
        return not any(is_hidden(part) for part in parts) and is_image_file(path.name)

    def on_created(self, event: FileSystemEvent):
        """Handle file creation."""
        if event.is_directory:
            return
        self._handle(event.src_path)

    def on_moved(self, event: FileSystemEvent):
        """Handle files renamed or moved into the inbox tree."""
        if event.is_directory:
            return
        dest = getattr(event, "dest_path", None)
        if dest and Path(dest).is_relative_to(self.directory):
            self._handle(dest)

    def _handle(self, raw_path) -> None:
        path = Path(raw_path)
        try:
            if not self.should_process(path):
                return
            self.log.info(f"New image detected: {path.name}")
            self.on_new_image(path)
        except Exception as e:
            self.log.error(f"File watcher error for {path}: {e}")


class WatchReactor:
    """Schedules one delayed upload for every image that lands in the inbox."""

    def __init__(
        self,
        executor: UploadExecutor,
        directory: Path,
        delay: float = 1.0,
        log=logger,
        observer_factory: Callable[[], Observer] = Observer,
    ):
        self.executor = executor
        self.directory = Path(directory)
        self.delay = delay
        self.log = log
        self.observer_factory = observer_factory

        self.handler = InboxEventHandler(self.directory, self._notify, log=log)
        self._observer: Optional[Observer] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._tasks: Set[asyncio.Task] = set()

    @property
    def is_watching(self) -> bool:
        return self._observer is not None

    @property
    def pending(self) -> int:
        """Number of uploads scheduled but not yet finished."""
        return len(self._tasks)

    def start(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> bool:
        """
        Start watching the directory.

        Must be called from the event loop that will run the uploads
        unless ``loop`` is given.

        Returns:
            True if the observer is running
        """
        if self.is_watching:
            return True

        self._loop = loop or asyncio.get_running_loop()
        self.log.info(f"Setting up file watcher for: {self.directory}")

        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            observer = self.observer_factory()
            observer.schedule(self.handler, str(self.directory), recursive=True)
            observer.daemon = True
            observer.start()
        except Exception as e:
            self.log.error(f"Failed to watch {self.directory}: {e}")
            return False

        self._observer = observer
        self.log.info(f"File watcher ready and monitoring: {self.directory}")
        return True

    async def stop(self) -> None:
        """Stop the observer and cancel uploads still waiting on their delay."""
        observer, self._observer = self._observer, None
        if observer is not None:
            observer.stop()
            await asyncio.to_thread(observer.join)
            self.log.info("File watcher stopped")

        for task in list(self._tasks):
            task.cancel()

    def _notify(self, path: Path) -> None:
        # Called from the observer thread.
        self._loop.call_soon_threadsafe(self._spawn, path)

    def _spawn(self, path: Path) -> None:
        # Events queued before stop() may still arrive here.
        if not self.is_watching:
            return
        task = self._loop.create_task(self._delayed_upload(path))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _delayed_upload(self, path: Path):
        await asyncio.sleep(self.delay)
        result = await self.executor.upload_file(path)
        if result.success:
            self.log.info(f"Auto-upload finished: {path.name} -> {result.url}")
        else:
            self.log.warning(f"Auto-upload failed: {path.name} ({result.error})")
        return result
