"""
HAProxy stick-table exporter for Prometheus.
"""

__version__ = "0.1.0"
