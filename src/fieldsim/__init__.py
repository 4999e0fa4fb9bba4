"""Field technician dispatch compliance simulator."""

__version__ = "0.1.0"
