"""
Metadata-driven XML serialization engine.

The serializer walks a heterogeneous sequence of objects and writes one XML
fragment per object, in input order:

    <?xml version="1.0" encoding="UTF-8"?>
    <Professor>
      <lastName type="String">X</lastName>
    </Professor>
    <notXMLable />

Which objects are exported, and which of their fields, is decided entirely by
the export markers (see ``xml_exporter.markers``). The markers of each distinct
class are read once per run through a ClassInfoCache.

Field values are inserted as ``str(value)`` without escaping unless
``ExportConfig.escape_values`` is set, in which case field elements are built
with lxml so text and attribute values are escaped and names are validated.
"""

import logging
import time

from pathlib import Path
from typing import Any, Iterable, Optional, Union

from lxml import etree

from ..exceptions import ElementNameError, FieldAccessError, FieldValueError, NullFieldValueError
from ..interfaces import (DocumentWriterInterface, PerformanceMonitorInterface,
                          SerializerInterface, TypeIntrospectorInterface)
from ..introspection.class_info import ClassInfoCache, TypeIntrospector
from ..markers import ExportRegistry
from ..models import ClassInfo, ExportConfig, ExportResult, FieldInfo, NullValuePolicy
from ..output.document_writer import FileDocumentWriter, StringDocumentWriter


XML_HEADER = '<?xml version="1.0" encoding="UTF-8"?>\n'
NOT_XMLABLE_ELEMENT = '<notXMLable />\n'
FIELD_INDENT = '  '


class XMLSerializer(SerializerInterface):
    """
    Serializes objects to XML using cached per-class export metadata.
    
    A cache passed to the constructor is reused across calls (the caller must
    not serialize concurrently with it); otherwise every call starts with a
    fresh cache, which lives only as long as that call.
    """
    
    def __init__(self, config: Optional[ExportConfig] = None,
                 cache: Optional[ClassInfoCache] = None,
                 introspector: Optional[TypeIntrospectorInterface] = None,
                 monitor: Optional[PerformanceMonitorInterface] = None,
                 registry: Optional[ExportRegistry] = None):
        """
        Initialize the serializer.
        
        Args:
            config: Export configuration; defaults are used when None
            cache: Shared metadata cache to reuse across calls
            introspector: Introspector for per-call caches; built from config and registry when None
            monitor: Optional performance monitor fed with per-object results
            registry: Export registry consulted by the default introspector
        """
        self.config = config or ExportConfig()
        self.cache = cache
        self.introspector = introspector
        self.monitor = monitor
        self.registry = registry
        self.logger = logging.getLogger(__name__)
    
    def serialize(self, objects: Iterable[Any], file_name: Union[str, Path]) -> ExportResult:
        """
        Serialize objects to an XML file.
        
        Args:
            objects: Heterogeneous objects to export, in output order
            file_name: Output file path; an existing file is overwritten
            
        Returns:
            ExportResult with counters for the run
            
        Raises:
            SinkWriteError: If the file cannot be opened or written
            NullFieldValueError: If a field is None and the null policy is ERROR
        """
        self.logger.info(f"Serializing objects to {file_name}")
        writer = FileDocumentWriter(file_name, encoding=self.config.encoding,
                                    create_dirs=self.config.create_dirs)
        result = self.serialize_to_writer(objects, writer)
        self.logger.info(f"Wrote {result.objects_processed} objects to {file_name} "
                         f"({result.objects_exported} exported, {result.objects_skipped} not xmlable) "
                         f"in {result.processing_time_seconds:.3f} seconds")
        return result
    
    def serialize_to_string(self, objects: Iterable[Any]) -> str:
        """Serialize objects and return the document as a string."""
        writer = StringDocumentWriter()
        self.serialize_to_writer(objects, writer)
        return writer.getvalue()
    
    def serialize_to_writer(self, objects: Iterable[Any],
                            writer: DocumentWriterInterface) -> ExportResult:
        """
        Serialize objects, in order, to ``writer``.
        
        The writer is opened here and closed on every exit path. A failed run
        leaves whatever was already written on the sink.
        """
        result = ExportResult()
        cache = self._cache_for_run()
        started = time.perf_counter()
        if self.monitor:
            self.monitor.start_monitoring()
        
        try:
            with writer:
                writer.write(XML_HEADER)
                for obj in objects:
                    info = self._resolve_class_info(cache, type(obj))
                    if info.is_xmlable:
                        if self.monitor:
                            self.monitor.start_stage('writing')
                        try:
                            self._write_object(obj, info, writer, result)
                        finally:
                            if self.monitor:
                                self.monitor.end_stage('writing')
                        result.objects_exported += 1
                    else:
                        writer.write(NOT_XMLABLE_ELEMENT)
                        result.objects_skipped += 1
                    result.objects_processed += 1
                    if self.monitor:
                        self.monitor.record_object(info.is_xmlable)
        finally:
            result.processing_time_seconds = time.perf_counter() - started
            if self.monitor:
                self.monitor.record_metric('types_cached', len(cache))
                result.performance_metrics = self.monitor.stop_monitoring()
        
        if result.field_errors:
            self.logger.warning(f"{result.field_errors} field(s) could not be read and were left out")
        return result
    
    def _cache_for_run(self) -> ClassInfoCache:
        if self.cache is not None:
            return self.cache
        introspector = self.introspector or TypeIntrospector(self.registry, self.config.field_order)
        return ClassInfoCache(introspector)
    
    def _resolve_class_info(self, cache: ClassInfoCache, cls: type) -> ClassInfo:
        if cls in cache or not self.monitor:
            return cache.get_or_build(cls)
        self.monitor.start_stage('introspection')
        try:
            return cache.get_or_build(cls)
        finally:
            self.monitor.end_stage('introspection')
    
    def _write_object(self, obj: Any, info: ClassInfo, writer: DocumentWriterInterface,
                      result: ExportResult) -> None:
        """Write the wrapping element pair for one exportable object."""
        element_name = self._element_name(info.class_name)
        writer.write(f"<{element_name}>\n")
        
        for field_info in info.fields.values():
            try:
                fragment = self._render_field(obj, field_info, info.class_name)
            except NullFieldValueError:
                raise
            except FieldAccessError as e:
                self.logger.warning(str(e))
                result.field_errors += 1
                result.errors.append(str(e))
                continue
            
            if fragment is not None:
                writer.write(fragment)
                result.fields_written += 1
        
        writer.write(f"</{element_name}>\n")
    
    def _render_field(self, obj: Any, field_info: FieldInfo, class_name: str) -> Optional[str]:
        """
        Render one field element, or None when the field is skipped.
        
        Raises:
            FieldAccessError: If the slot cannot be read from ``obj``
            NullFieldValueError: If the value is None and the null policy is ERROR
            FieldValueError: If escaping is enabled and the value is not XML compatible
        """
        slot_name = field_info.slot_name
        try:
            value = getattr(obj, slot_name)
        except AttributeError as e:
            raise FieldAccessError(f"Cannot read field '{slot_name}' of {class_name}: {e}",
                                   slot_name, class_name) from e
        
        if value is None:
            policy = self.config.null_policy
            if policy is NullValuePolicy.ERROR:
                raise NullFieldValueError(f"Field '{slot_name}' of {class_name} is None",
                                          slot_name, class_name)
            if policy is NullValuePolicy.SKIP:
                self.logger.debug(f"Skipping None field '{slot_name}' of {class_name}")
                return None
            text = ''
        else:
            text = str(value)
        
        if self.config.escape_values:
            return FIELD_INDENT + self._build_escaped_element(field_info, text, class_name) + '\n'
        
        tag = field_info.output_name
        return f'{FIELD_INDENT}<{tag} type="{field_info.declared_kind}">{text}</{tag}>\n'
    
    def _build_escaped_element(self, field_info: FieldInfo, text: str, class_name: str) -> str:
        tag = self._element_name(field_info.output_name)
        element = etree.Element(tag)
        try:
            element.set('type', field_info.declared_kind)
            element.text = text
        except ValueError as e:
            raise FieldValueError(f"Value of field '{field_info.slot_name}' of {class_name} "
                                  f"is not XML compatible: {e}", field_info.slot_name, class_name) from e
        return etree.tostring(element, encoding='unicode')
    
    def _element_name(self, name: str) -> str:
        """Return ``name`` unchanged, validating it when escaping is enabled."""
        if self.config.escape_values:
            try:
                etree.Element(name)
            except ValueError as e:
                raise ElementNameError(f"'{name}' is not a valid XML element name: {e}", name) from e
        return name


def serialize(objects: Iterable[Any], file_name: Union[str, Path],
              config: Optional[ExportConfig] = None) -> ExportResult:
    """
    Serialize objects to an XML file with a fresh serializer.
    
    Args:
        objects: Heterogeneous objects to export, in output order
        file_name: Output file path
        config: Optional export configuration
        
    Returns:
        ExportResult with counters for the run
    """
    return XMLSerializer(config).serialize(objects, file_name)
