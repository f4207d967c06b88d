"""
Hierahelpers session

Tracks the local staging directories created for inline hieradata during
one test group, so they can be removed when the group ends.
"""

import logging
import os
import shutil
from typing import List, Optional

logger = logging.getLogger(__name__)


class HieraSession:
    """
    Temporary hieradata directories owned by one test group.

    ``setup()`` runs before the group and ``teardown()`` after it. Sessions
    are not shared between groups, so no locking is done.
    """

    def __init__(self):
        self.temp_dirs: Optional[List[str]] = None

    def setup(self) -> None:
        """Prepare for a test group."""
        if self.temp_dirs is None:
            self.temp_dirs = []

    def teardown(self) -> None:
        """Clean up after a test group."""
        self.clear()

    def track(self, path: str) -> None:
        """Record a staging directory for later removal."""
        if self.temp_dirs is None:
            self.temp_dirs = []
        self.temp_dirs.append(path)

    def clear(self) -> None:
        """
        Recursively delete every tracked directory, then forget them.

        Directories that are already gone are skipped. A directory that
        fails to delete stays tracked and the error propagates.
        """
        if not self.temp_dirs:
            return

        while self.temp_dirs:
            data_dir = self.temp_dirs[0]
            if os.path.isdir(data_dir):
                logger.debug("Removing staging directory %s", data_dir)
                shutil.rmtree(data_dir)
            else:
                logger.debug("Staging directory already removed: %s", data_dir)
            self.temp_dirs.pop(0)

    def __len__(self) -> int:
        return len(self.temp_dirs) if self.temp_dirs else 0
