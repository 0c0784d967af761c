"""
Declarative export markers.

Classes opt in to export with the ``@xmlable`` decorator and declare exportable
slots with ``xml_field``, which attaches an XMLField descriptor to a dataclass
field's metadata. Types that cannot be decorated (third-party classes, classes
configured from an export contract) are described in an ExportRegistry instead.

Example:
    @xmlable
    @dataclass
    class Professor:
        first_name: str
        last_name: str = xml_field(type="String")
        age: int = xml_field(type="int", default=0)
"""

import dataclasses
import logging

from typing import Dict, Mapping, Optional

from .models import XMLField


XMLABLE_ATTRIBUTE = '__xmlable__'
XML_FIELD_KEY = 'xml_field'

logger = logging.getLogger(__name__)


def xmlable(cls: type) -> type:
    """
    Class decorator marking instances of ``cls`` as eligible for export.
    
    The marker is stored on the class itself and is not inherited: a subclass
    of an exportable class must be decorated again to be exported.
    """
    setattr(cls, XMLABLE_ATTRIBUTE, True)
    return cls


def xml_field(type: str, name: str = "", *, default=dataclasses.MISSING,
              default_factory=dataclasses.MISSING, **kwargs):
    """
    Declare an exportable dataclass field.
    
    Args:
        type: Declared kind label written to the ``type`` attribute (not checked against the value)
        name: Optional output element name; the field name is used when empty
        default: Default value, as for ``dataclasses.field``
        default_factory: Default factory, as for ``dataclasses.field``
        **kwargs: Passed through to ``dataclasses.field``
        
    Returns:
        A dataclasses.Field carrying the XMLField descriptor in its metadata
    """
    metadata = dict(kwargs.pop('metadata', None) or {})
    metadata[XML_FIELD_KEY] = XMLField(type=type, name=name)
    return dataclasses.field(default=default, default_factory=default_factory,
                             metadata=metadata, **kwargs)


def get_field_descriptor(dataclass_field: dataclasses.Field) -> Optional[XMLField]:
    """Return the XMLField attached to a dataclass field, or None."""
    return dataclass_field.metadata.get(XML_FIELD_KEY)


class ExportRegistry:
    """
    Side-table of export metadata for types that are not decorated.
    
    Registering a class marks it exportable and records its exportable slots in
    registration order. Registered metadata takes precedence over decorator
    metadata on the same class.
    """
    
    def __init__(self):
        self._entries: Dict[type, Dict[str, XMLField]] = {}
    
    def register(self, cls: type, fields: Mapping[str, XMLField]) -> None:
        """
        Register ``cls`` as exportable with the given slot descriptors.
        
        Args:
            cls: Class to register
            fields: Ordered mapping of slot name to XMLField
        """
        if not isinstance(cls, type):
            raise TypeError(f"expected a class, got {cls!r}")
        for slot_name, descriptor in fields.items():
            if not isinstance(descriptor, XMLField):
                raise TypeError(f"descriptor for {cls.__name__}.{slot_name} must be an XMLField")
        if cls in self._entries:
            logger.debug(f"Replacing export registration for {cls.__name__}")
        self._entries[cls] = dict(fields)
    
    def unregister(self, cls: type) -> None:
        self._entries.pop(cls, None)
    
    def is_registered(self, cls: type) -> bool:
        return cls in self._entries
    
    def fields_for(self, cls: type) -> Dict[str, XMLField]:
        """Return a copy of the registered slot descriptors for ``cls``."""
        return dict(self._entries.get(cls, {}))
    
    def clear(self) -> None:
        self._entries.clear()
    
    def __len__(self) -> int:
        return len(self._entries)


def is_xmlable(cls: type, registry: Optional[ExportRegistry] = None) -> bool:
    """
    Check whether ``cls`` itself carries the exportability marker.
    
    Args:
        cls: Class to check
        registry: Registry to consult as well; the global registry when None
    """
    if vars(cls).get(XMLABLE_ATTRIBUTE, False):
        return True
    registry = registry if registry is not None else get_export_registry()
    return registry.is_registered(cls)


# Global registry instance
_global_export_registry: Optional[ExportRegistry] = None


def get_export_registry() -> ExportRegistry:
    """
    Get the global export registry instance.
    
    Returns:
        Global ExportRegistry instance
    """
    global _global_export_registry
    
    if _global_export_registry is None:
        _global_export_registry = ExportRegistry()
    
    return _global_export_registry


def reset_export_registry() -> None:
    """Reset the global export registry instance."""
    global _global_export_registry
    _global_export_registry = None
