"""
Custom exceptions for the XML export system.

This module defines specific exception types for the different error conditions
that can occur while introspecting exportable types and writing XML output.
"""


class XMLExportError(Exception):
    """Base exception for all XML export related errors."""
    
    def __init__(self, message: str, type_name: str = None):
        """
        Initialize XML export error.
        
        Args:
            message: Error description
            type_name: Optional short name of the type being exported when the error occurred
        """
        super().__init__(message)
        self.type_name = type_name


class SinkWriteError(XMLExportError):
    """Exception raised when the output sink cannot be opened, written or closed."""
    
    def __init__(self, message: str, path: str = None):
        """
        Initialize sink write error.
        
        Args:
            message: Error description
            path: Optional path of the sink that failed
        """
        super().__init__(message)
        self.path = path


class FieldAccessError(XMLExportError):
    """Exception raised when an exportable field cannot be read from an instance."""
    
    def __init__(self, message: str, field_name: str = None, type_name: str = None):
        """
        Initialize field access error.
        
        Args:
            message: Error description
            field_name: Name of the slot that could not be read
            type_name: Short name of the type declaring the slot
        """
        super().__init__(message, type_name)
        self.field_name = field_name


class NullFieldValueError(FieldAccessError):
    """Exception raised when an exportable field holds None and the null policy is ERROR."""
    pass


class FieldValueError(XMLExportError):
    """Exception raised when a field value cannot be stored as XML text in escape mode."""
    
    def __init__(self, message: str, field_name: str = None, type_name: str = None):
        """
        Initialize field value error.
        
        Args:
            message: Error description
            field_name: Name of the slot holding the value
            type_name: Short name of the type declaring the slot
        """
        super().__init__(message, type_name)
        self.field_name = field_name


class ElementNameError(XMLExportError):
    """Exception raised when a type or field name is not a valid XML element name."""
    pass


class ExportContractError(XMLExportError):
    """Exception raised when an export contract file is malformed or cannot be applied."""
    pass


class ConfigurationError(XMLExportError):
    """Exception raised when configuration is invalid or missing."""
    pass
