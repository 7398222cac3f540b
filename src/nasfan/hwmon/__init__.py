"""
Hardware Monitor Package for nasfan

This package provides access to the temperature sensors and PWM fan
channels of a NAS appliance.

Key Components:
- Sysfs: Re-rootable access to sysfs and /dev device files
- read_domain_temperature: Hottest CPU or storage temperature of a cycle
- FanController: Writes a duty cycle to every existing PWM channel

Example Usage:
    >>> from nasfan.hwmon import Domain, FanController, read_domain_temperature
    >>>
    >>> cpu = read_domain_temperature(Domain.CPU)
    >>> print(f"CPU: {cpu.value}°C")
    >>>
    >>> FanController().apply_duty(128)

Note:
    This package requires:
    - smartmontools (smartctl) for drive temperatures
    - Root access to query drives and write PWM channels
"""

from .sysfs import Sysfs, HwmonError, FanControlError, NoFanChannelsError
from .sensors import (
    Domain,
    TemperatureReading,
    DomainTemperature,
    CPUTemperatureReader,
    StorageTemperatureReader,
    read_domain_temperature,
    read_all_domains,
)
from .fans import FanController, FanWrite

__all__ = [
    'Sysfs',
    'HwmonError',
    'FanControlError',
    'NoFanChannelsError',
    'Domain',
    'TemperatureReading',
    'DomainTemperature',
    'CPUTemperatureReader',
    'StorageTemperatureReader',
    'read_domain_temperature',
    'read_all_domains',
    'FanController',
    'FanWrite'
]
