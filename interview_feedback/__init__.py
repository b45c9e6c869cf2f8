"""
Interview feedback service.

Records a mock interview, derives sentiment and speech metrics for every
answer, and stores a scored feedback report.
"""

__version__ = "0.1.0"
