"""
Abstract interfaces and base classes for the XML export system.

This module defines the contracts that all system components must implement
to ensure consistent behavior and enable dependency injection.
"""

import logging

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, Optional

from .exceptions import SinkWriteError
from .models import ClassInfo, ExportConfig, ExportContract, ExportResult


class DocumentWriterInterface(ABC):
    """
    Abstract interface for the sink receiving serialized text fragments.
    
    Writers are used as context managers; ``close`` runs on every exit path,
    including exceptions raised mid-write.
    """
    
    @abstractmethod
    def open(self) -> None:
        """
        Acquire the underlying sink.
        
        Raises:
            SinkWriteError: If the sink cannot be opened
        """
        pass
    
    @abstractmethod
    def write(self, text: str) -> None:
        """
        Append a text fragment to the sink.
        
        Args:
            text: Fragment to append, written verbatim
            
        Raises:
            SinkWriteError: If the write fails
        """
        pass
    
    @abstractmethod
    def close(self) -> None:
        """Release the underlying sink. Safe to call more than once."""
        pass
    
    def __enter__(self) -> 'DocumentWriterInterface':
        self.open()
        return self
    
    def __exit__(self, exc_type, exc_value, traceback) -> bool:
        if exc_type is None:
            self.close()
            return False
        # Keep the exception that ended the run; a close failure is only logged
        try:
            self.close()
        except SinkWriteError as e:
            logging.getLogger(__name__).error(f"Failed to close writer after {exc_type.__name__}: {e}")
        return False


class TypeIntrospectorInterface(ABC):
    """Abstract interface for components that derive export metadata from a type."""
    
    @abstractmethod
    def inspect(self, cls: type) -> ClassInfo:
        """
        Inspect a class and build its export metadata.
        
        Args:
            cls: Runtime type of an object being exported
            
        Returns:
            ClassInfo describing exportability and exportable fields
        """
        pass


class SerializerInterface(ABC):
    """Abstract interface for serialization engines."""
    
    @abstractmethod
    def serialize_to_writer(self, objects: Iterable[Any],
                            writer: DocumentWriterInterface) -> ExportResult:
        """
        Serialize objects, in order, to an already constructed writer.
        
        Args:
            objects: Heterogeneous objects to export
            writer: Sink receiving the document
            
        Returns:
            ExportResult with counters for the run
        """
        pass
    
    @abstractmethod
    def serialize(self, objects: Iterable[Any], file_name: str) -> ExportResult:
        """
        Serialize objects to a file.
        
        Args:
            objects: Heterogeneous objects to export
            file_name: Path of the output file
            
        Returns:
            ExportResult with counters for the run
        """
        pass


class ConfigurationManagerInterface(ABC):
    """Abstract interface for configuration management components."""
    
    @abstractmethod
    def load_export_contract(self, contract_path: str) -> ExportContract:
        """
        Load an export contract from file.
        
        Args:
            contract_path: Path to a JSON or YAML contract file
            
        Returns:
            Loaded export contract
        """
        pass
    
    @abstractmethod
    def get_export_config(self) -> ExportConfig:
        """
        Get export configuration parameters.
        
        Returns:
            Export configuration object
        """
        pass


class PerformanceMonitorInterface(ABC):
    """Abstract interface for performance monitoring components."""
    
    @abstractmethod
    def start_monitoring(self) -> None:
        """Start performance monitoring."""
        pass
    
    @abstractmethod
    def stop_monitoring(self) -> Dict[str, Any]:
        """
        Stop monitoring and return the collected metrics.
        
        Returns:
            Dictionary of performance metrics
        """
        pass
    
    @abstractmethod
    def record_object(self, exported: bool) -> None:
        """
        Record that one object was serialized.
        
        Args:
            exported: True if the object was written as a wrapping element pair
        """
        pass
    
    @abstractmethod
    def record_metric(self, metric_name: str, value: Any) -> None:
        """
        Record a performance metric.
        
        Args:
            metric_name: Name of the metric
            value: Metric value
        """
        pass
    
    def start_stage(self, stage_name: str) -> None:
        """Start timing a processing stage."""
        pass
    
    def end_stage(self, stage_name: str) -> Optional[float]:
        """End timing a processing stage."""
        return None
