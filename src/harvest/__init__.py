"""
Farmer Harvest - collect crops, dodge crows, beat the clock.
"""

__version__ = "0.1.0"
