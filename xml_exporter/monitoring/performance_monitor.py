"""
Performance monitoring implementation for the XML export system.

This module provides throughput, stage timing and memory metrics for
serialization runs. Memory is sampled with psutil at the start and end of
each run.
"""

import time
import logging
import psutil

from typing import Dict, Any, Optional
from datetime import datetime
from dataclasses import dataclass, field

from ..interfaces import PerformanceMonitorInterface


@dataclass
class PerformanceMetrics:
    """Container for performance metrics."""
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    objects_processed: int = 0
    objects_exported: int = 0
    objects_skipped: int = 0
    
    # Processing stage timings
    introspection_time: float = 0.0
    writing_time: float = 0.0
    
    # System resource metrics
    peak_memory_mb: float = 0.0
    
    # Throughput metrics
    objects_per_second: float = 0.0
    
    # Custom metrics
    custom_metrics: Dict[str, Any] = field(default_factory=dict)


class PerformanceMonitor(PerformanceMonitorInterface):
    """
    Performance monitor for serialization runs.
    
    One monitor covers one run at a time: ``start_monitoring`` resets the
    collected metrics.
    """
    
    def __init__(self):
        """Initialize the performance monitor."""
        self.logger = logging.getLogger(__name__)
        self._metrics = PerformanceMetrics()
        self._is_monitoring = False
        self._stage_start_times: Dict[str, float] = {}
        self._process = psutil.Process()
    
    @property
    def is_monitoring(self) -> bool:
        return self._is_monitoring
    
    def start_monitoring(self) -> None:
        """Start performance monitoring."""
        if self._is_monitoring:
            self.logger.warning("Performance monitoring already started")
            return
        
        self._metrics = PerformanceMetrics()
        self._metrics.start_time = datetime.now()
        self._stage_start_times.clear()
        self._is_monitoring = True
        self._sample_memory()
        
        self.logger.debug("Performance monitoring started")
    
    def stop_monitoring(self) -> Dict[str, Any]:
        """Stop monitoring and return the performance summary."""
        if not self._is_monitoring:
            self.logger.warning("Performance monitoring not started")
            return {}
        
        self._metrics.end_time = datetime.now()
        self._is_monitoring = False
        self._sample_memory()
        
        total_time = self._get_total_processing_time()
        if total_time > 0:
            self._metrics.objects_per_second = self._metrics.objects_processed / total_time
        
        summary = self._get_performance_summary()
        self.logger.info(f"Performance monitoring stopped. Processed {self._metrics.objects_processed} objects "
                         f"in {total_time:.3f} seconds ({self._metrics.objects_per_second:.1f} objects/sec)")
        return summary
    
    def record_object(self, exported: bool) -> None:
        """Record the result of serializing a single object."""
        self._metrics.objects_processed += 1
        if exported:
            self._metrics.objects_exported += 1
        else:
            self._metrics.objects_skipped += 1
    
    def record_metric(self, metric_name: str, value: Any) -> None:
        """Record a custom performance metric."""
        if not self._is_monitoring:
            return
        
        self._metrics.custom_metrics[metric_name] = value
        self.logger.debug(f"Recorded metric: {metric_name} = {value}")
    
    def start_stage(self, stage_name: str) -> None:
        """Start timing a processing stage."""
        self._stage_start_times[stage_name] = time.perf_counter()
    
    def end_stage(self, stage_name: str) -> float:
        """End timing a processing stage and return duration."""
        if stage_name not in self._stage_start_times:
            return 0.0
        
        duration = time.perf_counter() - self._stage_start_times.pop(stage_name)
        
        if stage_name == 'introspection':
            self._metrics.introspection_time += duration
        elif stage_name == 'writing':
            self._metrics.writing_time += duration
        
        return duration
    
    def _sample_memory(self) -> None:
        memory_mb = self._get_current_memory_mb()
        if memory_mb > self._metrics.peak_memory_mb:
            self._metrics.peak_memory_mb = memory_mb
    
    def _get_current_memory_mb(self) -> float:
        """Get current memory usage in MB."""
        try:
            return self._process.memory_info().rss / 1024 / 1024
        except psutil.Error:
            return 0.0
    
    def _get_total_processing_time(self) -> float:
        """Get total processing time in seconds."""
        if not self._metrics.start_time or not self._metrics.end_time:
            return 0.0
        return (self._metrics.end_time - self._metrics.start_time).total_seconds()
    
    def _get_performance_summary(self) -> Dict[str, Any]:
        """Get comprehensive performance summary."""
        return {
            'total_processing_time_seconds': self._get_total_processing_time(),
            'objects_processed': self._metrics.objects_processed,
            'objects_exported': self._metrics.objects_exported,
            'objects_skipped': self._metrics.objects_skipped,
            'objects_per_second': self._metrics.objects_per_second,
            'stage_timings': {
                'introspection_time_seconds': self._metrics.introspection_time,
                'writing_time_seconds': self._metrics.writing_time,
            },
            'resource_usage': {
                'peak_memory_mb': self._metrics.peak_memory_mb,
            },
            'custom_metrics': self._metrics.custom_metrics.copy()
        }
