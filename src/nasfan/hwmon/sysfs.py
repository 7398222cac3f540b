"""
Device File Access Module

This module wraps the handful of filesystem operations the control loop
needs on sysfs and /dev paths, so the whole hardware surface can be
re-rooted onto a temporary directory in tests.
"""

import logging
import os
from typing import Optional

logger = logging.getLogger(__name__)

class HwmonError(Exception):
    """Base exception for hardware monitor errors"""
    pass

class FanControlError(HwmonError):
    """Raised when fan channels cannot be driven"""
    pass

class NoFanChannelsError(FanControlError):
    """Raised when none of the candidate fan channels exist"""

    def __init__(self, search_path: str):
        self.search_path = search_path
        super().__init__(f"No fan devices found at: {search_path}*")

class Sysfs:
    """Filesystem backend for device paths.

    All paths handed to this class are absolute device paths such as
    ``/sys/class/hwmon/hwmon0/pwm1``. They are resolved below ``root``,
    which is ``/`` on real hardware.

    Examples:
        >>> fs = Sysfs()
        >>> fs.read_text("/sys/class/thermal/thermal_zone0/temp")
        '45000\\n'
    """

    def __init__(self, root: str = "/"):
        """Initialize backend

        Args:
            root: Directory the absolute device paths are resolved against
        """
        self.root = root

    def resolve(self, path: str) -> str:
        """Map a device path to the real filesystem location"""
        if self.root == "/":
            return path
        return os.path.join(self.root, path.lstrip("/"))

    def exists(self, path: str) -> bool:
        return os.path.exists(self.resolve(path))

    def read_text(self, path: str) -> str:
        """Read a device file

        Raises:
            OSError: If the file is missing or unreadable
        """
        with open(self.resolve(path)) as f:
            return f.read()

    def write_text(self, path: str, value: str) -> None:
        """Write a value to a device file

        Raises:
            OSError: If the file cannot be written
        """
        with open(self.resolve(path), "w") as f:
            f.write(value)

    def read_int(self, path: str) -> Optional[int]:
        """Read a device file holding a single integer.

        Returns:
            The integer, or None if the file is unreadable or not numeric
        """
        try:
            return int(self.read_text(path).strip())
        except (OSError, ValueError) as e:
            logger.debug(f"Unable to read integer from {path}: {e}")
            return None
