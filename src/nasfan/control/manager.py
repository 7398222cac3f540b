"""
Fan Control Manager Module

This module provides the control loop: read temperatures, compute the
shared duty cycle and write it to the fans, once or every interval.
"""

import logging
import threading
from dataclasses import dataclass
from typing import List, Optional

from ..hwmon import Domain, DomainTemperature, FanController, FanWrite, Sysfs, read_all_domains
from ..hwmon.sensors import SmartctlRunner
from .config import FanCurveConfig, DEFAULT_CONFIG, POLL_INTERVAL
from .curve import DutyBreakdown, DutyCombiner

logger = logging.getLogger(__name__)

DOMAIN_LABELS = {
    Domain.CPU: "CPU",
    Domain.STORAGE: "HDD",
}

@dataclass(frozen=True)
class CycleResult:
    """Everything computed during one control cycle"""
    cpu: DomainTemperature
    storage: DomainTemperature
    duty: DutyBreakdown
    writes: List[FanWrite]

class ControlManager:
    """Runs the read, compute, actuate cycle"""

    def __init__(self, config: FanCurveConfig = DEFAULT_CONFIG, sysfs: Optional[Sysfs] = None,
                 runner: Optional[SmartctlRunner] = None, verbose: bool = True):
        """Initialize control manager

        Args:
            config: Fan curve thresholds
            sysfs: Filesystem backend shared by sensors and fans
            runner: smartctl runner for storage sensors
            verbose: Log every intermediate value and read fans back (manual mode)
        """
        self.config = config
        self.sysfs = sysfs or Sysfs()
        self.runner = runner
        self.verbose = verbose
        self.fans = FanController(self.sysfs)
        self.combiner = DutyCombiner(config)

        self._stop_event = threading.Event()
        self.cycles = 0

    def _log_temperatures(self, temperature: DomainTemperature) -> None:
        label = DOMAIN_LABELS[temperature.domain]
        for reading in temperature.readings:
            value = f"{reading.value}°C" if reading.is_valid else "unavailable"
            logger.info(f"{reading.source} {label} Temperature: {value}")
        if not temperature.has_data:
            logger.warning(f"No readable {label} sensors, assuming 0°C")

    def _format_domain(self, temperature: DomainTemperature) -> str:
        source = temperature.hottest_source
        if source is None:
            return f"{temperature.value}°C"
        return f"{temperature.value}°C ({source})"

    def run_cycle(self) -> CycleResult:
        """Run one read, compute, actuate cycle

        Returns:
            CycleResult with temperatures, duty breakdown and fan writes

        Raises:
            NoFanChannelsError: If no fan channel exists
        """
        temps = read_all_domains(sysfs=self.sysfs, runner=self.runner)
        cpu = temps[Domain.CPU]
        storage = temps[Domain.STORAGE]

        duty = self.combiner.combine(cpu.value, storage.value)

        if self.verbose:
            self._log_temperatures(cpu)
            self._log_temperatures(storage)
            logger.info(f"Max HDD Temperature: {self._format_domain(storage)}")
            logger.info(f"CPU Temperature: {self._format_domain(cpu)}")
            logger.info(f"Min Fan Speed: {duty.minimum}")
            logger.info(f"HDD Fan Speed: {duty.storage}")
            logger.info(f"CPU Fan Speed: {duty.cpu}")
            logger.info(f"Final Fan Speed (Max): {duty.final}")

        writes = self.fans.apply_duty(duty.final, verify=self.verbose)

        if self.verbose:
            for write in writes:
                if not write.written:
                    continue
                reported = write.reported if write.reported is not None else "unknown"
                logger.info(
                    f"Fan {write.channel} has been set to {write.duty}/255, "
                    f"and is reading as {reported}/255."
                )

        self.cycles += 1
        return CycleResult(cpu=cpu, storage=storage, duty=duty, writes=writes)

    def run_forever(self, interval: float = POLL_INTERVAL, max_cycles: Optional[int] = None) -> None:
        """Run cycles until stopped

        The interval is idle time after each cycle, so the actual period is
        the interval plus the time the cycle took.

        Args:
            interval: Seconds to wait between cycles
            max_cycles: Stop after this many cycles (None to run until stop())

        Raises:
            NoFanChannelsError: If no fan channel exists
        """
        logger.info(f"Control loop started, interval {interval}s")
        completed = 0
        while not self.stopped:
            self.run_cycle()
            completed += 1
            if max_cycles is not None and completed >= max_cycles:
                break
            self._stop_event.wait(interval)
        logger.info("Control loop stopped")

    def stop(self) -> None:
        """Stop the control loop after the current cycle"""
        self._stop_event.set()

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()
