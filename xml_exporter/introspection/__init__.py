"""Type introspection and per-type export metadata caching."""

from .class_info import TypeIntrospector, ClassInfoCache

__all__ = ['TypeIntrospector', 'ClassInfoCache']
