"""Periodic rescanning of the active document."""

import asyncio
from pathlib import Path

import aiofiles
from loguru import logger

from case_aware_spellcheck.config import Settings
from case_aware_spellcheck.exceptions import SpellcheckError
from case_aware_spellcheck.spell_engine import ProgressCallback, ScanReport, SpellDecisionEngine


class DocumentWatcher:
    """Feeds one document through the decision engine on a fixed interval.

    Only documents whose extension is listed in ``allowed_extensions`` are
    scanned. A cycle that fails is logged and the next cycle still runs.
    """

    def __init__(self, engine: SpellDecisionEngine, settings: Settings):
        self.engine = engine
        self.settings = settings
        self._stop_event = asyncio.Event()

    def is_allowed(self, path: str | Path) -> bool:
        return Path(path).suffix.lower() in self.settings.allowed_extensions

    async def scan_file(
        self, path: str | Path, progress: ProgressCallback | None = None
    ) -> ScanReport:
        """Read a UTF-8 document and run the engine over its text."""
        async with aiofiles.open(path, encoding="utf-8") as f:
            text = await f.read()
        logger.debug(f"Scanning {path}")
        return await self.engine.scan_text(text, progress=progress)

    async def watch(
        self,
        path: str | Path,
        cycles: int | None = None,
        progress: ProgressCallback | None = None,
    ) -> list[ScanReport]:
        """Rescan ``path`` every ``refresh_interval_seconds`` until stopped.

        Args:
            path: Document to watch
            cycles: Number of scans to run; None runs until ``stop()``
            progress: Optional per-word progress callback

        Returns:
            Reports of the successful scans

        Raises:
            ValueError: If the document extension is not allowed
        """
        if not self.is_allowed(path):
            msg = (
                f"File extension of {path} is not allowed. "
                f"Allowed: {', '.join(self.settings.allowed_extensions)}"
            )
            raise ValueError(msg)

        reports = []
        completed = 0
        interval = self.settings.refresh_interval_seconds
        logger.info(f"Watching {path} every {interval}s")

        while not self._stop_event.is_set() and (cycles is None or completed < cycles):
            try:
                report = await self.scan_file(path, progress=progress)
            except (OSError, UnicodeDecodeError, SpellcheckError) as e:
                logger.error(f"Scan of {path} failed, skipping this cycle: {e}")
            else:
                reports.append(report)
                if report.learned:
                    logger.info(f"Learned {len(report.learned)} word/s from {path}")
            completed += 1

            if cycles is not None and completed >= cycles:
                break
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=interval)
            except TimeoutError:
                continue

        self._stop_event.clear()
        logger.info(f"Stopped watching {path}")
        return reports

    def stop(self) -> None:
        """Ask ``watch()`` to end after its current scan.

        A stop requested before ``watch()`` starts makes it return without scanning.
        """
        self._stop_event.set()
