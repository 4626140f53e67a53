"""Sleep cycle and phase detection from wearable monitoring data."""

__version__ = "0.1.0"
