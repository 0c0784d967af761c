"""
Centralized configuration defaults for XML export runs.

This module defines operational configuration constants used throughout the system.
Environment variables (see ``config_manager``) and CLI arguments override these
defaults at runtime.
"""


class ExportDefaults:
    """
    Centralized operational configuration for XML export.
    
    All values are defaults that can be overridden via CLI arguments:
    - xml_exporter --output people.xml --null-policy skip
    - xml_exporter --log-level DEBUG
    """
    
    # Output
    OUTPUT_FILE = "output.xml"  # Written relative to the working directory
    ENCODING = "utf-8"
    CREATE_DIRS = False  # Create missing parent directories of OUTPUT_FILE
    
    # Serialization
    NULL_POLICY = "empty"  # empty, skip or error
    ESCAPE_VALUES = False  # Insert field values verbatim
    FIELD_ORDER = "declaration"  # declaration or name
    
    # Logging
    LOG_LEVEL = "INFO"  # Default logging level (CRITICAL, ERROR, WARNING, INFO, DEBUG)
    
    @classmethod
    def to_dict(cls) -> dict:
        """
        Export all defaults as a dictionary.
        
        Returns:
            Dictionary of all ExportDefaults class attributes.
        """
        return {
            key: getattr(cls, key)
            for key in dir(cls)
            if not key.startswith('_') and key.isupper()
        }
    
    @classmethod
    def log_summary(cls, logger=None):
        """
        Log a summary of all operational defaults.
        
        Args:
            logger: Optional logger instance. If None, prints to stdout.
        """
        config_dict = cls.to_dict()
        summary = "\n".join([f"  {key}: {value}" for key, value in sorted(config_dict.items())])
        message = f"Export Configuration Defaults:\n{summary}"
        
        if logger:
            logger.info(message)
        else:
            print(message)
