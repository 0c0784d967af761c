"""
Per-type export metadata discovery and caching.

TypeIntrospector turns a runtime class into a ClassInfo by reading the
exportability marker and the XMLField descriptors of the slots declared
directly on that class. ClassInfoCache memoizes the result per class so a
serialization run inspects each distinct type exactly once, no matter how many
of its instances are exported.
"""

import dataclasses
import inspect
import logging

from typing import Dict, Optional

from ..interfaces import TypeIntrospectorInterface
from ..markers import ExportRegistry, get_export_registry, get_field_descriptor, is_xmlable
from ..models import ClassInfo, FieldInfo, FieldOrder


class TypeIntrospector(TypeIntrospectorInterface):
    """
    Builds ClassInfo entries from decorator and registry metadata.
    
    Only slots declared on the class itself are considered; fields inherited
    from a dataclass base are not exported through the subclass.
    """
    
    def __init__(self, registry: Optional[ExportRegistry] = None,
                 field_order: FieldOrder = FieldOrder.DECLARATION):
        """
        Initialize the introspector.
        
        Args:
            registry: Side-table of registered types; the global registry when None
            field_order: Order in which fields are stored in each ClassInfo
        """
        self.registry = registry if registry is not None else get_export_registry()
        self.field_order = field_order
        self.logger = logging.getLogger(__name__)
        self.introspection_count = 0
    
    def inspect(self, cls: type) -> ClassInfo:
        """
        Inspect a class and build its export metadata.
        
        Non-exportable classes get an entry without fields; their slots are
        never scanned.
        """
        self.introspection_count += 1
        exportable = is_xmlable(cls, self.registry)
        
        fields: Dict[str, FieldInfo] = {}
        if exportable:
            if self.registry.is_registered(cls):
                for slot_name, descriptor in self.registry.fields_for(cls).items():
                    fields[slot_name] = FieldInfo(slot_name, descriptor)
            else:
                fields = self._scan_declared_fields(cls)
            
            if self.field_order is FieldOrder.NAME:
                fields = dict(sorted(fields.items(), key=lambda item: item[1].output_name))
        
        info = ClassInfo(type_identity=cls, is_xmlable=exportable,
                         class_name=cls.__name__, fields=fields)
        self.logger.debug(f"Inspected {cls.__name__}: xmlable={exportable}, fields={list(info.fields)}")
        return info
    
    def _scan_declared_fields(self, cls: type) -> Dict[str, FieldInfo]:
        """Collect XMLField descriptors from the dataclass fields declared on ``cls``."""
        if not dataclasses.is_dataclass(cls):
            self.logger.debug(f"{cls.__name__} is not a dataclass and not registered; no fields to export")
            return {}
        
        own_names = inspect.get_annotations(cls)
        fields: Dict[str, FieldInfo] = {}
        for dataclass_field in dataclasses.fields(cls):
            if dataclass_field.name not in own_names:
                continue
            descriptor = get_field_descriptor(dataclass_field)
            if descriptor is None:
                continue
            fields[dataclass_field.name] = FieldInfo(dataclass_field.name, descriptor)
        return fields


class ClassInfoCache:
    """
    Lazily populated mapping from class to ClassInfo.
    
    Entries are never evicted or invalidated for the lifetime of the cache.
    Not safe for concurrent callers.
    """
    
    def __init__(self, introspector: Optional[TypeIntrospectorInterface] = None):
        self.introspector = introspector or TypeIntrospector()
        self._entries: Dict[type, ClassInfo] = {}
        self.logger = logging.getLogger(__name__)
    
    def get_or_build(self, cls: type) -> ClassInfo:
        """
        Return the cached ClassInfo for ``cls``, inspecting it on first request.
        
        Args:
            cls: Runtime type of an object being exported
            
        Returns:
            The same ClassInfo instance for every call with the same class
        """
        info = self._entries.get(cls)
        if info is None:
            info = self.introspector.inspect(cls)
            self._entries[cls] = info
            self.logger.debug(f"Cached export metadata for {cls.__name__} ({len(self._entries)} types cached)")
        return info
    
    def clear(self) -> None:
        self._entries.clear()
    
    def __contains__(self, cls: type) -> bool:
        return cls in self._entries
    
    def __len__(self) -> int:
        return len(self._entries)
