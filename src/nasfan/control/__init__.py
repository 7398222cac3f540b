"""
Control package for nasfan

This package provides the fan curve, the duty cycle combination and
the control loop driving the fans.
"""

from .config import FanCurveConfig, DEFAULT_CONFIG
from .curve import FanCurve, LinearFanCurve, DutyBreakdown, DutyCombiner, compute_duty, combine_duty
from .manager import ControlManager, CycleResult

__all__ = [
    'FanCurveConfig',
    'DEFAULT_CONFIG',
    'FanCurve',
    'LinearFanCurve',
    'DutyBreakdown',
    'DutyCombiner',
    'compute_duty',
    'combine_duty',
    'ControlManager',
    'CycleResult'
]
