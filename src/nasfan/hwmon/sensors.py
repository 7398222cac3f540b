"""
Temperature Sensor Module

This module reads CPU and storage temperatures from a fixed list of
candidate sources and reduces each domain to its hottest reading.

CPU sources are hwmon/thermal sysfs files reporting millidegrees Celsius.
Storage sources are SATA drives queried through smartctl, where the raw
value of S.M.A.R.T. attribute 194 is the temperature in whole degrees.

A source that cannot be read is not an error: drive bays may be empty and
sensors may be missing on a given board revision. Such sources are recorded
as absent readings and simply do not take part in the maximum.
"""

import logging
import re
import subprocess
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from .sysfs import Sysfs

logger = logging.getLogger(__name__)

# CPU temperature files, hwmon channels first, thermal zone as fallback
CPU_SOURCES: Tuple[str, ...] = (
    "/sys/class/hwmon/hwmon0/temp1_input",
    "/sys/class/hwmon/hwmon0/temp2_input",
    "/sys/class/hwmon/hwmon0/temp3_input",
    "/sys/class/thermal/thermal_zone0/temp",
)

# Drive bay block devices
STORAGE_DEVICES: Tuple[str, ...] = tuple(f"/dev/sd{letter}" for letter in "abcdefgh")

SMART_TEMPERATURE_ATTRIBUTE = "194 Temperature_Celsius"
SMART_TEMPERATURE_FIELD = 9  # 10th whitespace-delimited column (RAW_VALUE)
SMARTCTL_TIMEOUT = 10.0

# Millidegree readings fit easily; anything longer is not a sensor value
_DIGITS = re.compile(r"[0-9]{1,12}")

SmartctlRunner = Callable[[str], Optional[str]]

class Domain(Enum):
    """Thermal domains aggregated independently"""
    CPU = "cpu"
    STORAGE = "storage"

@dataclass(frozen=True)
class TemperatureReading:
    """A single temperature source sampled in the current cycle.

    Attributes:
        domain: Thermal domain the source belongs to
        source: Device path of the source
        value: Whole degrees Celsius, or None if the source was unreadable
    """
    domain: Domain
    source: str
    value: Optional[int]

    @property
    def is_valid(self) -> bool:
        return self.value is not None

@dataclass(frozen=True)
class DomainTemperature:
    """Hottest valid reading of a domain.

    ``value`` is 0 when no source was readable, which is indistinguishable
    from a genuinely cold domain as far as the fan curve is concerned.
    ``has_data`` tells the two apart for diagnostics.
    """
    domain: Domain
    value: int
    readings: Tuple[TemperatureReading, ...] = ()

    @property
    def has_data(self) -> bool:
        return any(r.is_valid for r in self.readings)

    @property
    def hottest_source(self) -> Optional[str]:
        """Source path that produced the domain value"""
        valid = [r for r in self.readings if r.is_valid]
        if not valid:
            return None
        return max(valid, key=lambda r: r.value).source

def parse_whole_degrees(text: str) -> Optional[int]:
    """Parse a non-negative integer, returning None for anything else"""
    text = text.strip()
    if not _DIGITS.fullmatch(text):
        return None
    return int(text)

def run_smartctl(device: str, timeout: float = SMARTCTL_TIMEOUT) -> Optional[str]:
    """Query S.M.A.R.T. data for a drive.

    Args:
        device: Block device path (e.g. /dev/sda)
        timeout: Seconds to wait before giving up on the drive

    Returns:
        smartctl output, or None if the drive could not be queried
    """
    try:
        result = subprocess.run(
            ["smartctl", "-a", device],
            capture_output=True,
            text=True,
            errors="replace",
            timeout=timeout
        )
    except subprocess.TimeoutExpired:
        logger.warning(f"smartctl timed out after {timeout}s on {device}")
        return None
    except OSError as e:
        logger.debug(f"Unable to run smartctl for {device}: {e}")
        return None

    if result.returncode != 0:
        logger.debug(f"smartctl exited with status {result.returncode} for {device}")
        return None
    return result.stdout

def parse_smart_temperature(output: str) -> Optional[int]:
    """Extract the drive temperature from smartctl -a output.

    Example attribute row:
        194 Temperature_Celsius 0x0022 114 099 000 Old_age Always - 36 (Min/Max 20/45)

    Returns:
        Temperature in degrees Celsius, or None if the row is missing or malformed
    """
    for line in output.splitlines():
        if SMART_TEMPERATURE_ATTRIBUTE not in line:
            continue
        fields = line.split()
        if len(fields) <= SMART_TEMPERATURE_FIELD:
            return None
        return parse_whole_degrees(fields[SMART_TEMPERATURE_FIELD])
    return None

class CPUTemperatureReader:
    """Reads CPU temperatures from sysfs millidegree files"""

    def __init__(self, sysfs: Optional[Sysfs] = None, sources: Tuple[str, ...] = CPU_SOURCES):
        self.sysfs = sysfs or Sysfs()
        self.sources = sources

    def read_source(self, path: str) -> TemperatureReading:
        """Read one CPU source, converting millidegrees to whole degrees"""
        value = None
        try:
            millidegrees = parse_whole_degrees(self.sysfs.read_text(path))
        except (OSError, ValueError) as e:
            logger.debug(f"Skipping CPU source {path}: {e}")
            millidegrees = None

        if millidegrees is not None:
            value = millidegrees // 1000
        else:
            logger.debug(f"No valid reading from {path}")
        return TemperatureReading(Domain.CPU, path, value)

    def read_all(self) -> List[TemperatureReading]:
        return [self.read_source(path) for path in self.sources]

class StorageTemperatureReader:
    """Reads drive temperatures via smartctl"""

    def __init__(self, runner: Optional[SmartctlRunner] = None,
                 devices: Tuple[str, ...] = STORAGE_DEVICES):
        """Initialize storage reader

        Args:
            runner: Callable returning smartctl output for a device, or None
                    when the device could not be queried
            devices: Candidate block devices
        """
        self.runner = runner or run_smartctl
        self.devices = devices

    def read_source(self, device: str) -> TemperatureReading:
        output = self.runner(device)
        value = parse_smart_temperature(output) if output is not None else None
        if output is not None and value is None:
            logger.debug(f"No temperature attribute in smartctl output for {device}")
        return TemperatureReading(Domain.STORAGE, device, value)

    def read_all(self) -> List[TemperatureReading]:
        return [self.read_source(device) for device in self.devices]

def reduce_readings(domain: Domain, readings: List[TemperatureReading]) -> DomainTemperature:
    """Reduce a domain's readings to the hottest valid value (0 if none)"""
    hottest = 0
    for reading in readings:
        if reading.is_valid and reading.value > hottest:
            hottest = reading.value
    return DomainTemperature(domain=domain, value=hottest, readings=tuple(readings))

def read_domain_temperature(domain: Domain, sysfs: Optional[Sysfs] = None,
                            runner: Optional[SmartctlRunner] = None) -> DomainTemperature:
    """Read every candidate source of a domain and return its maximum

    Args:
        domain: Domain to read
        sysfs: Filesystem backend for CPU sources
        runner: smartctl runner for storage sources

    Returns:
        DomainTemperature with value 0 if no source was readable
    """
    if domain is Domain.CPU:
        readings = CPUTemperatureReader(sysfs).read_all()
    else:
        readings = StorageTemperatureReader(runner).read_all()
    return reduce_readings(domain, readings)

def read_all_domains(sysfs: Optional[Sysfs] = None,
                     runner: Optional[SmartctlRunner] = None) -> Dict[Domain, DomainTemperature]:
    return {
        domain: read_domain_temperature(domain, sysfs=sysfs, runner=runner)
        for domain in Domain
    }
