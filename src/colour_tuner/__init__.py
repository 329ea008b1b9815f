"""
Colour tuner - live HSV range calibration against a remote server.
"""

from .session import TunerSession

__all__ = ["TunerSession"]
