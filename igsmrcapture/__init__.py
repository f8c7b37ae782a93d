"""Capture GSM-R terminal serial traffic and modem signals to record files and UDP frames."""

__version__ = "0.1.0"