"""Fan curve thresholds."""

from dataclasses import dataclass, asdict
from typing import Any, Dict

# Target (healthy) temperature runs fans at the minimum duty, maximum
# temperature runs them at full duty, linear in between.
CPU_TARGET = 50
CPU_MAX = 70
STORAGE_TARGET = 32
STORAGE_MAX = 50
MIN_DUTY = 39  # ~15% of 255

POLL_INTERVAL = 60  # seconds between cycles in service mode

@dataclass(frozen=True)
class FanCurveConfig:
    """Thresholds for both domains, fixed for the process lifetime.

    Attributes:
        cpu_target: CPU temperature (°C) at or below which the CPU curve is 0
        cpu_max: CPU temperature (°C) at or above which the CPU curve is 255
        storage_target: Drive temperature (°C) at or below which the storage curve is 0
        storage_max: Drive temperature (°C) at or above which the storage curve is 255
        min_duty: Lower bound on the final duty cycle (0-255)
    """
    cpu_target: int = CPU_TARGET
    cpu_max: int = CPU_MAX
    storage_target: int = STORAGE_TARGET
    storage_max: int = STORAGE_MAX
    min_duty: int = MIN_DUTY

    def as_dict(self) -> Dict[str, Any]:
        """Nested representation used for display"""
        values = asdict(self)
        return {
            "cpu": {"target": values["cpu_target"], "max": values["cpu_max"]},
            "storage": {"target": values["storage_target"], "max": values["storage_max"]},
            "min_duty": values["min_duty"],
        }

DEFAULT_CONFIG = FanCurveConfig()
