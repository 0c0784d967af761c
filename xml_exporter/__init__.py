"""
XML Export System

A metadata-driven tool for exporting heterogeneous collections of Python objects
to an XML document, driven by per-class and per-field export markers.
"""

__version__ = "1.0.0"

# Import core models and interfaces for easy access
from .models import (
    XMLField,
    FieldInfo,
    ClassInfo,
    ExportConfig,
    ExportContract,
    ExportResult,
    FieldOrder,
    NullValuePolicy
)

from .markers import (
    xmlable,
    xml_field,
    is_xmlable,
    ExportRegistry,
    get_export_registry,
    reset_export_registry
)

from .interfaces import (
    DocumentWriterInterface,
    TypeIntrospectorInterface,
    SerializerInterface,
    ConfigurationManagerInterface,
    PerformanceMonitorInterface
)

from .exceptions import (
    XMLExportError,
    SinkWriteError,
    FieldAccessError,
    NullFieldValueError,
    FieldValueError,
    ElementNameError,
    ExportContractError,
    ConfigurationError
)

from .introspection import TypeIntrospector, ClassInfoCache
from .serialization import XMLSerializer, serialize

__all__ = [
    # Core models
    "XMLField",
    "FieldInfo",
    "ClassInfo",
    "ExportConfig",
    "ExportContract",
    "ExportResult",
    "FieldOrder",
    "NullValuePolicy",
    
    # Markers
    "xmlable",
    "xml_field",
    "is_xmlable",
    "ExportRegistry",
    "get_export_registry",
    "reset_export_registry",
    
    # Interfaces
    "DocumentWriterInterface",
    "TypeIntrospectorInterface",
    "SerializerInterface",
    "ConfigurationManagerInterface",
    "PerformanceMonitorInterface",
    
    # Exceptions
    "XMLExportError",
    "SinkWriteError",
    "FieldAccessError",
    "NullFieldValueError",
    "FieldValueError",
    "ElementNameError",
    "ExportContractError",
    "ConfigurationError",
    
    # Engine
    "TypeIntrospector",
    "ClassInfoCache",
    "XMLSerializer",
    "serialize"
]
