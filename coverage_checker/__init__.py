"""
LTE coverage checker.

Decides whether a FloLive EU2/US2 operator serves LTE near a US ZIP code
or coordinate, using crowdsourced OpenCellID tower data.
"""

__version__ = "0.1.0"
