"""
Integration Tests for nasfan

These tests run complete control cycles against a fake sysfs tree and
fake smartctl output, checking the duty cycle that lands on the fans.
"""

import os
import pytest

from nasfan.control import ControlManager, DEFAULT_CONFIG
from nasfan.hwmon import NoFanChannelsError, Sysfs
from nasfan.hwmon.fans import FAN_DIR, FAN_CHANNELS
from nasfan.hwmon.sensors import CPU_SOURCES

MOCK_SMART_OUTPUT = """ID# ATTRIBUTE_NAME          FLAG     VALUE WORST THRESH TYPE      UPDATED  WHEN_FAILED RAW_VALUE
  5 Reallocated_Sector_Ct   0x0033   100   100   010    Pre-fail  Always       -       0
194 Temperature_Celsius     0x0022   {temp:03d}   099   000    Old_age   Always       -       {temp} (Min/Max 21/52)
"""

def build_system(root, cpu_millidegrees=None, drive_temps=None, fans=FAN_CHANNELS):
    """Create a sysfs tree and smartctl runner for one appliance"""
    sysfs = Sysfs(root=str(root))
    os.makedirs(sysfs.resolve(FAN_DIR), exist_ok=True)
    for path, value in (cpu_millidegrees or {}).items():
        os.makedirs(os.path.dirname(sysfs.resolve(path)), exist_ok=True)
        with open(sysfs.resolve(path), "w") as f:
            f.write(f"{value}\n")
    for name in fans:
        with open(sysfs.resolve(f"{FAN_DIR}/{name}"), "w") as f:
            f.write("0\n")

    outputs = {device: MOCK_SMART_OUTPUT.format(temp=temp)
               for device, temp in (drive_temps or {}).items()}
    return sysfs, outputs.get

def fan_values(sysfs, fans=FAN_CHANNELS):
    return {name: sysfs.read_text(f"{FAN_DIR}/{name}").strip() for name in fans}

def test_storage_at_max_drives_full_speed(tmp_path):
    """CPU at target and a drive at its maximum run the fans flat out"""
    sysfs, runner = build_system(
        tmp_path,
        cpu_millidegrees={CPU_SOURCES[0]: 50000},
        drive_temps={"/dev/sda": 50}
    )
    result = ControlManager(DEFAULT_CONFIG, sysfs=sysfs, runner=runner).run_cycle()

    assert result.duty.cpu == 0
    assert result.duty.storage == 255
    assert result.duty.final == 255
    assert set(fan_values(sysfs).values()) == {"255"}

def test_cpu_halfway_without_drives(tmp_path):
    """CPU halfway up its curve with no drives installed"""
    sysfs, runner = build_system(tmp_path, cpu_millidegrees={CPU_SOURCES[2]: 60000})
    result = ControlManager(DEFAULT_CONFIG, sysfs=sysfs, runner=runner).run_cycle()

    assert result.cpu.value == 60
    assert result.storage.value == 0
    assert result.duty.cpu == 127
    assert result.duty.storage == 0
    assert result.duty.final == 127
    assert set(fan_values(sysfs).values()) == {"127"}

def test_no_sensors_runs_minimum(tmp_path):
    """No readable sensors at all still keep the fans at the minimum"""
    sysfs, runner = build_system(tmp_path)
    result = ControlManager(DEFAULT_CONFIG, sysfs=sysfs, runner=runner).run_cycle()

    assert result.cpu.value == 0
    assert result.storage.value == 0
    assert result.duty.combined == 0
    assert result.duty.final == 39
    assert set(fan_values(sysfs).values()) == {"39"}

def test_single_fan_channel(tmp_path):
    """Only the one existing channel is written"""
    sysfs, runner = build_system(
        tmp_path,
        cpu_millidegrees={CPU_SOURCES[3]: 65000},
        drive_temps={"/dev/sdb": 36, "/dev/sdf": 44},
        fans=("pwm3",)
    )
    result = ControlManager(DEFAULT_CONFIG, sysfs=sysfs, runner=runner).run_cycle()

    assert [w.channel for w in result.writes] == [f"{FAN_DIR}/pwm3"]
    assert result.duty.final == 191
    assert fan_values(sysfs, fans=("pwm3",)) == {"pwm3": "191"}
    for name in ("pwm1", "pwm2", "pwm4"):
        assert not sysfs.exists(f"{FAN_DIR}/{name}")

def test_no_fan_channels_is_fatal(tmp_path):
    """A missing fan controller aborts the cycle"""
    sysfs, runner = build_system(tmp_path, cpu_millidegrees={CPU_SOURCES[0]: 45000}, fans=())
    with pytest.raises(NoFanChannelsError, match="No fan devices found at: /sys/class/hwmon/hwmon0"):
        ControlManager(DEFAULT_CONFIG, sysfs=sysfs, runner=runner).run_cycle()

def test_hotter_domain_wins_across_cycles(tmp_path):
    """Each cycle re-reads the sensors from scratch"""
    sysfs, runner = build_system(
        tmp_path,
        cpu_millidegrees={CPU_SOURCES[0]: 55000},
        drive_temps={"/dev/sdc": 41}
    )
    manager = ControlManager(DEFAULT_CONFIG, sysfs=sysfs, runner=runner, verbose=False)
    assert manager.run_cycle().duty.final == 127   # storage 41 beats CPU 55

    with open(sysfs.resolve(CPU_SOURCES[0]), "w") as f:
        f.write("70000\n")
    assert manager.run_cycle().duty.final == 255
    assert set(fan_values(sysfs).values()) == {"255"}
