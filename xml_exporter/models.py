"""
Core data models for the XML export system.

This module defines the primary data structures used throughout the system:
field export descriptors, cached per-type export metadata, export contracts,
export configuration and run results.
"""

import codecs

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import List, Optional, Dict, Any, Mapping

from .exceptions import ConfigurationError


class NullValuePolicy(Enum):
    """What the serializer does with an exportable field whose value is None."""
    EMPTY = "empty"
    SKIP = "skip"
    ERROR = "error"


class FieldOrder(Enum):
    """Order in which the fields of one object are emitted."""
    DECLARATION = "declaration"
    NAME = "name"


@dataclass(frozen=True)
class XMLField:
    """
    Field export descriptor attached to a single slot.
    
    Attributes:
        type: Free-form declared kind label, emitted verbatim as the ``type`` attribute
        name: Optional output element name; the slot name is used when empty
    """
    type: str
    name: str = ""
    
    def __post_init__(self):
        """Validate the declared kind label."""
        if not self.type:
            raise ValueError("type cannot be empty")
    
    def resolve_name(self, slot_name: str) -> str:
        """Return the override name, or the slot name when no override is set."""
        return self.name or slot_name


@dataclass(frozen=True)
class FieldInfo:
    """
    One exportable slot of a type, as captured during introspection.
    
    Attributes:
        slot_name: Attribute name read from each instance
        descriptor: The XMLField attached to the slot
        output_name: Resolved element name (override or slot name)
    """
    slot_name: str
    descriptor: XMLField
    output_name: str = field(init=False)
    
    def __post_init__(self):
        object.__setattr__(self, 'output_name', self.descriptor.resolve_name(self.slot_name))
    
    @property
    def declared_kind(self) -> str:
        return self.descriptor.type


@dataclass(frozen=True)
class ClassInfo:
    """
    Cached export metadata for one runtime type.
    
    Built once per type by the introspector and never modified afterwards.
    Non-exportable types still get an entry (with no fields) so the marker
    check is not repeated.
    
    Attributes:
        type_identity: The class this entry describes
        is_xmlable: True if the class carries the exportability marker
        class_name: Short class name used as the wrapping element name
        fields: Ordered, read-only mapping of slot name to FieldInfo
    """
    type_identity: type
    is_xmlable: bool
    class_name: str
    fields: Mapping[str, FieldInfo] = field(default_factory=dict)
    
    def __post_init__(self):
        object.__setattr__(self, 'fields', MappingProxyType(dict(self.fields)))
    
    def field_infos(self) -> List[FieldInfo]:
        """Return the field descriptors in their stored order."""
        return list(self.fields.values())


@dataclass
class FieldMapping:
    """
    Contract entry describing one exportable slot of a registered type.
    
    Attributes:
        slot: Attribute name on the instance
        type: Declared kind label
        name: Optional output element name override
    """
    slot: str
    type: str
    name: str = ""
    
    def __post_init__(self):
        """Validate field mapping configuration."""
        if not self.slot:
            raise ValueError("slot cannot be empty")
        if not self.type:
            raise ValueError("type cannot be empty")
        if self.name is None:
            self.name = ""


@dataclass
class TypeMapping:
    """
    Contract entry registering a class for export without decorating it.
    
    Attributes:
        class_path: Import path in ``package.module:ClassName`` form
        fields: Exportable slots, in emission order
    """
    class_path: str
    fields: List[FieldMapping] = None
    
    def __post_init__(self):
        """Validate type mapping configuration."""
        if not self.class_path or ':' not in self.class_path:
            raise ValueError(f"class must be given as 'module:ClassName', got {self.class_path!r}")
        if self.fields is None:
            self.fields = []


@dataclass
class ExportContract:
    """
    Side-table of export metadata loaded from a JSON or YAML file.
    
    Attributes:
        types: Registered types with their exportable slots
        source_path: Path the contract was loaded from, if any
    """
    types: List[TypeMapping] = None
    source_path: Optional[str] = None
    
    def __post_init__(self):
        """Initialize default values for mutable fields."""
        if self.types is None:
            self.types = []


@dataclass
class ExportConfig:
    """
    Configuration parameters for one serialization run.
    
    Attributes:
        encoding: Encoding used when the output file is opened; must be UTF-8, the encoding the header declares
        null_policy: Handling of None field values
        escape_values: Escape text and attribute values through lxml instead of inserting them verbatim
        field_order: Order in which fields are emitted inside a wrapping element
        create_dirs: Create missing parent directories of the output file
    """
    encoding: str = "utf-8"
    null_policy: NullValuePolicy = NullValuePolicy.EMPTY
    escape_values: bool = False
    field_order: FieldOrder = FieldOrder.DECLARATION
    create_dirs: bool = False
    
    def __post_init__(self):
        """Validate and normalize export configuration."""
        if not self.encoding:
            raise ValueError("encoding cannot be empty")
        try:
            codec_name = codecs.lookup(self.encoding).name
        except LookupError:
            raise ConfigurationError(f"Unknown output encoding: {self.encoding}")
        if codec_name != "utf-8":
            raise ConfigurationError(f"Output encoding must be UTF-8 to match the XML declaration, got {self.encoding}")
        if isinstance(self.null_policy, str):
            self.null_policy = NullValuePolicy(self.null_policy.lower())
        if isinstance(self.field_order, str):
            self.field_order = FieldOrder(self.field_order.lower())


@dataclass
class ExportResult:
    """
    Results from a serialization run.
    
    Attributes:
        objects_processed: Total number of objects visited
        objects_exported: Objects written as a wrapping element pair
        objects_skipped: Objects written as the notXMLable placeholder
        fields_written: Field elements emitted across all objects
        field_errors: Fields that could not be read and were left out
        processing_time_seconds: Wall-clock duration of the run
        errors: Messages for every recovered field error
        performance_metrics: Metrics reported by the performance monitor, if any
    """
    objects_processed: int = 0
    objects_exported: int = 0
    objects_skipped: int = 0
    fields_written: int = 0
    field_errors: int = 0
    processing_time_seconds: float = 0.0
    errors: List[str] = None
    performance_metrics: Dict[str, Any] = None
    
    def __post_init__(self):
        """Initialize default values for mutable fields."""
        if self.errors is None:
            self.errors = []
        if self.performance_metrics is None:
            self.performance_metrics = {}
    
    @property
    def export_rate(self) -> float:
        """Percentage of processed objects that were exportable."""
        if self.objects_processed == 0:
            return 0.0
        return (self.objects_exported / self.objects_processed) * 100.0
