"""
Observability module for temple-passport.

This module provides:
- Metrics collection with Prometheus
"""

__all__ = ["metrics"]
