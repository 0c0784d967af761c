"""
Monitoring module for the XML export system.

This module provides performance monitoring and metrics collection
for export runs.
"""

from .performance_monitor import PerformanceMonitor, PerformanceMetrics

__all__ = [
    'PerformanceMonitor',
    'PerformanceMetrics'
]
