"""Document writers receiving serialized XML fragments."""

from .document_writer import FileDocumentWriter, StringDocumentWriter

__all__ = ['FileDocumentWriter', 'StringDocumentWriter']
