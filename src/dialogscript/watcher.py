"""Watchdog-based loop that re-exports a session file whenever it changes."""

from __future__ import annotations

import logging
import signal
import threading
import time
from pathlib import Path

from watchdog.events import FileModifiedEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .codec import read_session
from .config import Config
from .errors import DialogScriptError
from .exporters import export_session

log = logging.getLogger(__name__)

_DEBOUNCE_SECONDS = 1.0


def run_export(
    session_path: Path,
    config: Config,
    *,
    formats: list[str] | None = None,
    output_dir: Path | None = None,
    dry_run: bool = False,
) -> list[Path]:
    """Load the session file and write every configured export."""
    session = read_session(session_path)
    return export_session(
        session,
        formats or config.formats,
        output_dir or config.output_dir,
        page_size=config.page_size,
        dry_run=dry_run,
    )


class _SessionEventHandler(FileSystemEventHandler):
    """Watches for modifications to one session file."""

    def __init__(
        self,
        session_path: Path,
        config: Config,
        *,
        formats: list[str] | None = None,
        output_dir: Path | None = None,
        dry_run: bool = False,
    ):
        super().__init__()
        self._session_path = session_path
        self._config = config
        self._formats = formats
        self._output_dir = output_dir
        self._dry_run = dry_run
        self._timer: threading.Timer | None = None
        self._lock = threading.Lock()

    def on_modified(self, event: FileModifiedEvent) -> None:  # type: ignore[override]
        if event.is_directory:
            return
        if Path(str(event.src_path)).name != self._session_path.name:
            return

        log.debug("Session file modified, scheduling export in %.1fs", _DEBOUNCE_SECONDS)
        self._schedule_export()

    def _schedule_export(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(_DEBOUNCE_SECONDS, self._do_export)
            self._timer.daemon = True
            self._timer.start()

    def _do_export(self) -> None:
        try:
            run_export(
                self._session_path,
                self._config,
                formats=self._formats,
                output_dir=self._output_dir,
                dry_run=self._dry_run,
            )
        except DialogScriptError as e:
            # Usually a half-written file; the next save triggers another pass
            log.warning("Skipping export: %s", e)
        except Exception:
            log.error("Export failed", exc_info=True)


def watch(
    session_path: Path,
    config: Config,
    *,
    formats: list[str] | None = None,
    output_dir: Path | None = None,
    dry_run: bool = False,
) -> None:
    """Export now, then again after every change. Blocks until interrupted."""
    session_path = Path(session_path).expanduser()
    if not session_path.parent.exists():
        log.error("Session directory does not exist: %s", session_path.parent)
        raise SystemExit(1)

    log.info("Running initial export...")
    run_export(session_path, config, formats=formats, output_dir=output_dir, dry_run=dry_run)

    handler = _SessionEventHandler(
        session_path, config, formats=formats, output_dir=output_dir, dry_run=dry_run,
    )
    observer = Observer()
    observer.schedule(handler, str(session_path.parent), recursive=False)

    stop_event = threading.Event()

    def _shutdown(signum: int, frame: object) -> None:
        sig_name = signal.Signals(signum).name
        log.info("Received %s, shutting down...", sig_name)
        stop_event.set()

    signal.signal(signal.SIGINT, _shutdown)
    signal.signal(signal.SIGTERM, _shutdown)

    observer.start()
    log.info("Watching %s for changes (Ctrl+C to stop)", session_path)

    try:
        while not stop_event.is_set():
            time.sleep(1)
    finally:
        observer.stop()
        observer.join()
        log.info("Watcher stopped")
