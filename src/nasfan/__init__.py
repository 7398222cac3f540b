"""nasfan - temperature driven fan control for NAS appliances."""

__version__ = "1.0.0"
