"""Real-time dot-pattern visualization of interfering point wave sources."""

__version__ = "0.1.0"
