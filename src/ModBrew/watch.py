"""Watch a mod directory and rebuild files as they change."""

import logging
import threading
from typing import Optional

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .pipeline import ModBuilder

logger = logging.getLogger("mod_pipeline.watch")


class ModChangeHandler(FileSystemEventHandler):
    """Forward file change and rename events to `ModBuilder.handle_change`."""

    def __init__(self, builder: ModBuilder):
        super().__init__()
        self.builder = builder

    def _forward(self, path) -> None:
        if isinstance(path, bytes):
            path = path.decode("utf-8", errors="surrogateescape")
        self.builder.handle_change(path)

    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._forward(event.src_path)

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._forward(event.src_path)

    def on_moved(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._forward(event.dest_path)


def watch(builder: ModBuilder, stop_event: Optional[threading.Event] = None,
          observer=None) -> None:
    """Block until ``stop_event`` is set or the user interrupts.

    Each notification is handled to completion before the next one; errors
    in a single file are logged by the builder and never end the session.
    """
    stop_event = stop_event or threading.Event()
    observer = observer or Observer()
    handler = ModChangeHandler(builder)
    observer.schedule(handler, builder.mod_path, recursive=builder.config.watch.recursive)

    logger.info("Setting up file watcher on %s", builder.mod_path)
    observer.start()
    logger.info("File watcher running, press Ctrl+C to exit")
    try:
        while not stop_event.is_set():
            stop_event.wait(builder.config.watch.poll_interval)
    except KeyboardInterrupt:
        logger.info("Stopping file watcher.")
    finally:
        observer.stop()
        observer.join()
