"""
Strategic Radar.

Scans for recent strategic items through an LLM, archives each scan as a
session and consolidates all sessions into one deduplicated base.
"""

__version__ = "1.0.0"
