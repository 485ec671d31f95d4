"""Container inspection: procfs, cgroup and mount readers, rate sampling and text view models."""

__version__ = "0.1.0"