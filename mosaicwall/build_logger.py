"""
Per-build file logging.

While a build runs, every record sent to the build's logger is also written to
{project_dir}/logs/build.log, so the scan, grid choice, warnings and manifest
events survive after the console scrolls away.
"""

import logging
from pathlib import Path
from typing import Optional


LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'


class BuildLogger:
    """
    Attach a build.log file handler to a logger for the duration of a build.

    Usage:
        with BuildLogger(output_dir, logger) as build_log:
            build_mosaic(source_dir, output_dir, orientation, logger=build_log)

    The handler is removed and closed on exit, and the logger's level is
    restored, so repeated builds in one process don't duplicate lines.
    """

    def __init__(self, project_dir: Path, logger: Optional[logging.Logger] = None):
        """
        Args:
            project_dir: Project directory; the log goes to project_dir/logs/build.log
            logger: Logger to mirror (default: 'mosaicwall.build')
        """
        self.project_dir = Path(project_dir)
        self.log_file = self.project_dir / 'logs' / 'build.log'
        self.logger = logger or logging.getLogger('mosaicwall.build')

        self._handler = None
        self._previous_level = None

    def __enter__(self) -> logging.Logger:
        self.log_file.parent.mkdir(parents=True, exist_ok=True)

        self._handler = logging.FileHandler(self.log_file, encoding='utf-8')
        self._handler.setLevel(logging.INFO)
        self._handler.setFormatter(logging.Formatter(LOG_FORMAT))
        self.logger.addHandler(self._handler)

        # INFO records must reach the handler even under a quieter root logger
        self._previous_level = self.logger.level
        if self.logger.getEffectiveLevel() > logging.INFO:
            self.logger.setLevel(logging.INFO)

        self.logger.info(f"Build log opened for {self.project_dir.name}")
        return self.logger

    def __exit__(self, exc_type, exc, tb):
        if exc_type is not None and not issubclass(exc_type, SystemExit):
            self.logger.error(f"Build aborted: {exc_type.__name__}: {exc}")

        self.logger.removeHandler(self._handler)
        self._handler.close()
        self._handler = None
        self.logger.setLevel(self._previous_level)

        return False
