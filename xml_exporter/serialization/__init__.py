"""Serialization engine producing the XML export document."""

from .xml_serializer import XMLSerializer, serialize, XML_HEADER, NOT_XMLABLE_ELEMENT

__all__ = ['XMLSerializer', 'serialize', 'XML_HEADER', 'NOT_XMLABLE_ELEMENT']
