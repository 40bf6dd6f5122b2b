"""
Astro Events - Conjunction Event Study Engine

Detects recurring geometric configurations among moving angular bodies,
merges detections into continuous periods, and measures how a price
series behaves around those periods compared with random baseline times.
"""

__version__ = "0.1.0"
__author__ = "Astro Events Team"
