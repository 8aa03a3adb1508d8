"""
Pingdom Exporter

Polls the Pingdom check API on a fixed interval and republishes check
status, response times and API liveness as Prometheus metrics.
"""

__version__ = "1.0.0"
