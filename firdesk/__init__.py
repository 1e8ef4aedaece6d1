"""Officer-facing FIR workflow controller."""

__version__ = "0.1.0"
