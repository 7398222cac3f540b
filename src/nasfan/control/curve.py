"""Fan curve implementations."""

from dataclasses import dataclass
import logging

from .config import FanCurveConfig

logger = logging.getLogger(__name__)

DUTY_MAX = 255

def compute_duty(floor: float, actual: float, ceiling: float) -> int:
    """Map a temperature onto a duty cycle.

    Linear between floor and ceiling, 0 at or below floor and 255 at or
    above ceiling. The result is truncated, not rounded.

    Args:
        floor: Temperature at which the curve starts rising
        actual: Measured temperature
        ceiling: Temperature at which the curve reaches full duty

    Returns:
        Duty cycle (0-255)
    """
    if actual <= floor:
        ratio = 0.0
    elif actual >= ceiling:
        ratio = 1.0
    else:
        ratio = (actual - floor) / (ceiling - floor)

    # Unreachable with floor < ceiling, guards inverted thresholds
    ratio = max(0.0, min(1.0, ratio))
    return int(ratio * DUTY_MAX)

class FanCurve:
    """Base class for fan duty curves."""

    def get_speed(self, temp: float) -> int:
        """Get duty cycle for a temperature.

        Args:
            temp: Temperature in Celsius

        Returns:
            Duty cycle (0-255)
        """
        raise NotImplementedError

class LinearFanCurve(FanCurve):
    """Linear ramp from 0 at the target temperature to 255 at the maximum."""

    def __init__(self, target: float, maximum: float):
        """Initialize with curve thresholds.

        Args:
            target: Temperature at which the curve starts rising
            maximum: Temperature at which the curve reaches full duty
        """
        if target >= maximum:
            logger.warning(f"Fan curve target {target}°C is not below maximum {maximum}°C")
        self.target = target
        self.maximum = maximum

    def get_speed(self, temp: float) -> int:
        return compute_duty(self.target, temp, self.maximum)

@dataclass(frozen=True)
class DutyBreakdown:
    """Duty cycles derived in one cycle.

    Attributes:
        cpu: Duty from the CPU curve
        storage: Duty from the storage curve
        minimum: Configured duty floor
        combined: Hotter of the two domains
        final: Duty to apply, never below minimum
    """
    cpu: int
    storage: int
    minimum: int
    combined: int
    final: int

class DutyCombiner:
    """Combines both domain curves into the duty cycle shared by every fan.

    CPU and storage share the same airflow, so the hotter domain drives
    the whole fan bank. The minimum duty is applied last and holds even
    when both domains read 0.
    """

    def __init__(self, config: FanCurveConfig):
        """Build the domain curves once from the thresholds.

        Args:
            config: Curve thresholds
        """
        self.cpu_curve = LinearFanCurve(config.cpu_target, config.cpu_max)
        self.storage_curve = LinearFanCurve(config.storage_target, config.storage_max)
        self.minimum = config.min_duty

    def combine(self, cpu_temp: float, storage_temp: float) -> DutyBreakdown:
        """Compute the duty cycle for the hottest CPU and drive temperatures.

        Returns:
            DutyBreakdown whose ``final`` field is the duty to apply
        """
        storage = self.storage_curve.get_speed(storage_temp)
        cpu = self.cpu_curve.get_speed(cpu_temp)
        combined = max(storage, cpu)
        final = max(combined, self.minimum)
        return DutyBreakdown(
            cpu=cpu,
            storage=storage,
            minimum=self.minimum,
            combined=combined,
            final=final
        )

def combine_duty(config: FanCurveConfig, cpu_temp: float, storage_temp: float) -> DutyBreakdown:
    """Compute the shared duty cycle for one set of temperatures.

    Args:
        config: Curve thresholds
        cpu_temp: Hottest CPU temperature
        storage_temp: Hottest drive temperature

    Returns:
        DutyBreakdown whose ``final`` field is the duty to apply
    """
    return DutyCombiner(config).combine(cpu_temp, storage_temp)
