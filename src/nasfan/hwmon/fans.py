"""
Fan Control Module

This module writes PWM duty cycles to the fan controller's sysfs
channels. The set of channels present depends on the hardware, so the
fixed candidate list is probed on every call rather than cached.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .sysfs import Sysfs, NoFanChannelsError

logger = logging.getLogger(__name__)

FAN_DIR = "/sys/class/hwmon/hwmon0"
FAN_CHANNELS: Tuple[str, ...] = ("pwm1", "pwm2", "pwm3", "pwm4")

PWM_MIN = 0
PWM_MAX = 255

@dataclass(frozen=True)
class FanWrite:
    """Outcome of writing a duty cycle to one channel.

    Attributes:
        channel: Path of the PWM control file
        duty: Duty cycle that was written (0-255)
        written: False if the channel exists but rejected the write
        reported: Value read back from the channel, None if not verified
                  or unreadable. Hardware may clamp or round the request.
    """
    channel: str
    duty: int
    written: bool = True
    reported: Optional[int] = None

class FanController:
    """Drives all PWM fan channels found under a hwmon device"""

    def __init__(self, sysfs: Optional[Sysfs] = None, fan_dir: str = FAN_DIR,
                 channels: Tuple[str, ...] = FAN_CHANNELS):
        """Initialize fan controller

        Args:
            sysfs: Filesystem backend
            fan_dir: hwmon directory holding the PWM files
            channels: Candidate PWM file names within fan_dir
        """
        self.sysfs = sysfs or Sysfs()
        self.fan_dir = fan_dir
        self.channels = channels

    def available_channels(self) -> List[str]:
        """Return paths of the candidate channels that currently exist"""
        paths = [f"{self.fan_dir}/{name}" for name in self.channels]
        return [path for path in paths if self.sysfs.exists(path)]

    def apply_duty(self, duty: int, verify: bool = False) -> List[FanWrite]:
        """Write a duty cycle to every existing fan channel

        Args:
            duty: Duty cycle (0-255)
            verify: Read each channel back after writing

        Returns:
            One FanWrite per existing channel

        Raises:
            ValueError: If duty is outside 0-255
            NoFanChannelsError: If no candidate channel exists
        """
        if not PWM_MIN <= duty <= PWM_MAX:
            raise ValueError(f"Invalid duty {duty}, must be {PWM_MIN}-{PWM_MAX}")

        channels = self.available_channels()
        if not channels:
            raise NoFanChannelsError(self.fan_dir)

        results = []
        for channel in channels:
            try:
                self.sysfs.write_text(channel, f"{duty}\n")
            except OSError as e:
                logger.error(f"Failed to set {channel} to {duty}: {e}")
                results.append(FanWrite(channel=channel, duty=duty, written=False))
                continue

            reported = self.sysfs.read_int(channel) if verify else None
            logger.debug(f"Wrote {duty} to {channel}")
            results.append(FanWrite(channel=channel, duty=duty, reported=reported))

        return results
