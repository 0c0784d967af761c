"""
Command-line interface for the XML export system.

Exports a list of objects, by default the bundled sample people, to an XML
file. Settings come from ExportDefaults, then XML_EXPORTER_* environment
variables, then command-line arguments.
"""

import argparse
import importlib
import logging
import os
import sys

from typing import Any, List, Optional

from .config.config_manager import get_config_manager
from .config.export_defaults import ExportDefaults
from .exceptions import ConfigurationError, XMLExportError
from .monitoring.performance_monitor import PerformanceMonitor
from .serialization.xml_serializer import XMLSerializer


DEFAULT_OBJECTS = "xml_exporter.samples:build_sample_people"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Export objects to XML using their export markers")
    
    parser.add_argument("-o", "--output",
                        help=f"Output XML file (default: {ExportDefaults.OUTPUT_FILE})")
    parser.add_argument("--objects", default=DEFAULT_OBJECTS,
                        help="Objects to export as 'module:attribute'; a callable attribute is called "
                             f"(default: {DEFAULT_OBJECTS})")
    parser.add_argument("--contract",
                        help="JSON or YAML export contract registering additional types")
    parser.add_argument("--null-policy", choices=["empty", "skip", "error"],
                        help=f"Handling of None field values (default: {ExportDefaults.NULL_POLICY})")
    parser.add_argument("--escape-values", action="store_true", default=None,
                        help="Escape field values and validate element names")
    parser.add_argument("--field-order", choices=["declaration", "name"],
                        help=f"Field emission order (default: {ExportDefaults.FIELD_ORDER})")
    parser.add_argument("--log-level", default=ExportDefaults.LOG_LEVEL,
                        choices=["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"],
                        help=f"Logging level (default: {ExportDefaults.LOG_LEVEL})")
    parser.add_argument("--log-file", help="Also write log messages to this file")
    return parser


def setup_logging(log_level: str, log_file: Optional[str] = None) -> None:
    """Configure root logging without reconfiguring it if handlers already exist."""
    level = getattr(logging, log_level.upper())
    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)
    root_logger.setLevel(level)
    
    if log_file:
        log_path = os.path.abspath(log_file)
        has_file_handler = any(isinstance(h, logging.FileHandler) and h.baseFilename == log_path
                               for h in root_logger.handlers)
        if not has_file_handler:
            file_handler = logging.FileHandler(log_path)
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
    
    logging.getLogger('lxml').setLevel(logging.WARNING)


def load_objects(target: str) -> List[Any]:
    """
    Resolve ``module:attribute`` to a list of objects.
    
    Raises:
        ConfigurationError: If the target cannot be imported or is not iterable
    """
    module_name, _, attribute = target.partition(':')
    if not module_name or not attribute:
        raise ConfigurationError(f"Objects must be given as 'module:attribute', got {target!r}")
    
    try:
        value = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigurationError(f"Cannot import module '{module_name}': {e}")
    for part in attribute.split('.'):
        try:
            value = getattr(value, part)
        except AttributeError:
            raise ConfigurationError(f"'{attribute}' not found in module '{module_name}'")
    
    if callable(value):
        value = value()
    if isinstance(value, (str, bytes)):
        raise ConfigurationError(f"{target} must be a sequence of objects, not a string")
    try:
        return list(value)
    except TypeError:
        raise ConfigurationError(f"{target} is not iterable")


def main(args: Optional[list] = None) -> int:
    """
    Main entry point for the CLI application.
    
    Args:
        args: Optional command line arguments (defaults to sys.argv)
        
    Returns:
        Exit code (0 for success, non-zero for error)
    """
    if args is None:
        args = sys.argv[1:]
    options = build_parser().parse_args(args)
    
    setup_logging(options.log_level, options.log_file)
    logger = logging.getLogger(__name__)
    
    try:
        config_manager = get_config_manager()
        params = config_manager.export_params
        if options.null_policy is not None:
            params.null_policy = options.null_policy
        if options.escape_values is not None:
            params.escape_values = options.escape_values
        if options.field_order is not None:
            params.field_order = options.field_order
        if options.output is not None:
            params.output_file = options.output
        if options.contract is not None:
            config_manager.paths.contract_path = options.contract
        
        config_manager.validate_configuration()
        config = config_manager.get_export_config()
        
        if config_manager.paths.contract_path:
            contract = config_manager.load_export_contract()
            registered = config_manager.apply_export_contract(contract)
            logger.info(f"Registered {registered} types from {contract.source_path}")
        
        objects = load_objects(options.objects)
        logger.info(f"Exporting {len(objects)} objects from {options.objects}")
        
        serializer = XMLSerializer(config, monitor=PerformanceMonitor())
        result = serializer.serialize(objects, config_manager.get_output_path())
        
        logger.info(f"Objects exported: {result.objects_exported}")
        logger.info(f"Objects not xmlable: {result.objects_skipped}")
        logger.info(f"Fields written: {result.fields_written}")
        if result.field_errors:
            logger.warning(f"Field errors: {result.field_errors}")
        
        return 0
        
    except XMLExportError as e:
        logger.error(f"Export failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
