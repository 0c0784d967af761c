"""
Centralized configuration management for the XML export system.

This module provides the ConfigManager class that serves as the single source of truth
for export parameters, configuration paths, environment variable handling and export
contracts (JSON/YAML side-tables registering classes for export without decorating them).
"""

import importlib
import os
import json
import logging
import yaml

from pathlib import Path
from typing import Dict, Any, Optional, Union
from dataclasses import dataclass, field

from ..interfaces import ConfigurationManagerInterface
from ..markers import ExportRegistry, get_export_registry
from ..models import ExportConfig, ExportContract, FieldMapping, TypeMapping, XMLField
from ..exceptions import ConfigurationError, ExportContractError
from .export_defaults import ExportDefaults


@dataclass
class ExportParameters:
    """Export parameters with environment variable support."""
    output_file: str = ExportDefaults.OUTPUT_FILE
    encoding: str = ExportDefaults.ENCODING
    null_policy: str = ExportDefaults.NULL_POLICY
    escape_values: bool = ExportDefaults.ESCAPE_VALUES
    field_order: str = ExportDefaults.FIELD_ORDER
    create_dirs: bool = ExportDefaults.CREATE_DIRS
    
    @classmethod
    def from_environment(cls) -> 'ExportParameters':
        """Create export parameters from environment variables."""
        return cls(
            output_file=os.environ.get('XML_EXPORTER_OUTPUT_FILE', cls.output_file),
            encoding=os.environ.get('XML_EXPORTER_ENCODING', cls.encoding),
            null_policy=os.environ.get('XML_EXPORTER_NULL_POLICY', cls.null_policy).lower(),
            escape_values=os.environ.get('XML_EXPORTER_ESCAPE_VALUES', str(cls.escape_values)).lower() == 'true',
            field_order=os.environ.get('XML_EXPORTER_FIELD_ORDER', cls.field_order).lower(),
            create_dirs=os.environ.get('XML_EXPORTER_CREATE_DIRS', str(cls.create_dirs)).lower() == 'true'
        )


@dataclass
class ConfigPaths:
    """Configuration file paths with environment variable support."""
    base_config_path: Path = field(default_factory=lambda: Path.cwd())
    contract_path: Optional[str] = None
    
    @classmethod
    def from_environment(cls, base_path: Optional[Union[str, Path]] = None) -> 'ConfigPaths':
        """Create configuration paths from environment variables."""
        if base_path:
            base_config_path = Path(base_path)
        else:
            base_config_path = Path(os.environ.get('XML_EXPORTER_CONFIG_PATH', Path.cwd()))
        
        return cls(
            base_config_path=base_config_path,
            contract_path=os.environ.get('XML_EXPORTER_CONTRACT_PATH') or None
        )


class ConfigManager(ConfigurationManagerInterface):
    """
    Centralized configuration manager serving as single source of truth.
    
    This class consolidates all configuration management including:
    - Export parameters (encoding, null policy, escaping, field order)
    - Export contract loading and registration
    - File path management
    - Environment variable handling
    """
    
    def __init__(self, base_config_path: Optional[Union[str, Path]] = None):
        """
        Initialize the centralized configuration manager.
        
        Args:
            base_config_path: Base path for configuration files. If None, uses current directory.
        """
        self.logger = logging.getLogger(__name__)
        
        # Load configuration from environment variables
        self.paths = ConfigPaths.from_environment(base_config_path)
        self.export_params = ExportParameters.from_environment()
        
        # Cache for loaded contracts
        self._contract_cache: Dict[str, ExportContract] = {}
        
        self.logger.debug(f"ConfigManager initialized with base path: {self.paths.base_config_path}")
    
    def get_export_config(self) -> ExportConfig:
        """
        Get export configuration with all parameters.
        
        Returns:
            ExportConfig object with environment-configured values
            
        Raises:
            ConfigurationError: If a configured value is not valid
        """
        try:
            return ExportConfig(
                encoding=self.export_params.encoding,
                null_policy=self.export_params.null_policy,
                escape_values=self.export_params.escape_values,
                field_order=self.export_params.field_order,
                create_dirs=self.export_params.create_dirs
            )
        except ValueError as e:
            raise ConfigurationError(f"Invalid export configuration: {e}")
    
    def get_output_path(self) -> Path:
        """Get the configured output file path."""
        return Path(self.export_params.output_file)
    
    def load_export_contract(self, contract_path: Optional[str] = None) -> ExportContract:
        """
        Load export contract with caching.
        
        Args:
            contract_path: Optional path to the contract. If None, uses the configured path.
            
        Returns:
            Loaded and validated export contract
            
        Raises:
            ConfigurationError: If no contract path is configured or the file does not exist
            ExportContractError: If the file cannot be parsed or has an invalid structure
        """
        if contract_path is None:
            contract_path = self.paths.contract_path
        if not contract_path:
            raise ConfigurationError("No export contract path configured")
        contract_path = str(contract_path)
        
        # Return cached contract if available
        if contract_path in self._contract_cache:
            self.logger.debug(f"Returning cached export contract for {contract_path}")
            return self._contract_cache[contract_path]
        
        full_path = self.paths.base_config_path / contract_path
        
        if not full_path.exists():
            raise ConfigurationError(f"Export contract file not found: {full_path}")
        
        try:
            with open(full_path, 'r', encoding='utf-8') as file:
                if full_path.suffix.lower() in ['.yaml', '.yml']:
                    contract_data = yaml.safe_load(file)
                elif full_path.suffix.lower() == '.json':
                    contract_data = json.load(file)
                else:
                    raise ExportContractError(f"Unsupported file format: {full_path.suffix}")
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise ExportContractError(f"Failed to parse export contract file {full_path}: {e}")
        except OSError as e:
            raise ConfigurationError(f"Failed to read export contract file {full_path}: {e}")
        
        contract = self._parse_export_contract(contract_data, contract_path)
        
        # Cache the result
        self._contract_cache[contract_path] = contract
        
        self.logger.info(f"Loaded export contract from {contract_path} ({len(contract.types)} types)")
        return contract
    
    def apply_export_contract(self, contract: ExportContract,
                              registry: Optional[ExportRegistry] = None) -> int:
        """
        Register every type of a contract for export.
        
        Args:
            contract: Loaded export contract
            registry: Registry to populate; the global registry when None
            
        Returns:
            Number of types registered
            
        Raises:
            ExportContractError: If a class path cannot be imported or does not name a class
        """
        registry = registry if registry is not None else get_export_registry()
        
        for type_mapping in contract.types:
            cls = self._resolve_class(type_mapping.class_path)
            registry.register(cls, {
                field_mapping.slot: XMLField(type=field_mapping.type, name=field_mapping.name)
                for field_mapping in type_mapping.fields
            })
            self.logger.debug(f"Registered {type_mapping.class_path} with {len(type_mapping.fields)} fields")
        
        return len(contract.types)
    
    def validate_configuration(self) -> bool:
        """
        Validate all configuration settings.
        
        Returns:
            True if all configurations are valid
            
        Raises:
            ConfigurationError: If any configuration is invalid
        """
        errors = []
        
        if not self.paths.base_config_path.exists():
            errors.append(f"Base configuration path does not exist: {self.paths.base_config_path}")
        
        if self.paths.contract_path:
            contract_full_path = self.paths.base_config_path / self.paths.contract_path
            if not contract_full_path.exists():
                errors.append(f"Export contract file does not exist: {contract_full_path}")
        
        if not self.export_params.output_file:
            errors.append("Output file must not be empty")
        
        try:
            self.get_export_config()
        except ConfigurationError as e:
            errors.append(str(e))
        
        if errors:
            raise ConfigurationError(f"Configuration validation failed: {'; '.join(errors)}")
        
        self.logger.info("Configuration validation passed")
        return True
    
    def get_configuration_summary(self) -> Dict[str, Any]:
        """
        Get a summary of all configuration settings.
        
        Returns:
            Dictionary containing configuration summary
        """
        return {
            'export': {
                'output_file': self.export_params.output_file,
                'encoding': self.export_params.encoding,
                'null_policy': self.export_params.null_policy,
                'escape_values': self.export_params.escape_values,
                'field_order': self.export_params.field_order,
                'create_dirs': self.export_params.create_dirs
            },
            'paths': {
                'base_config_path': str(self.paths.base_config_path),
                'contract_path': self.paths.contract_path
            }
        }
    
    def clear_cache(self) -> None:
        """Clear all cached contracts."""
        self._contract_cache.clear()
        
        self.logger.info("Configuration cache cleared")
    
    def reload_configuration(self) -> None:
        """Reload configuration from environment variables and clear cache."""
        self.export_params = ExportParameters.from_environment()
        self.clear_cache()
        
        self.logger.info("Configuration reloaded from environment variables")
    
    def _parse_export_contract(self, contract_data: Any, contract_path: str) -> ExportContract:
        """
        Parse contract data into an ExportContract object.
        
        Args:
            contract_data: Raw contract data from JSON/YAML
            contract_path: Path to contract file (for error reporting)
            
        Returns:
            Parsed ExportContract object
            
        Raises:
            ExportContractError: If contract structure is invalid
        """
        if not isinstance(contract_data, dict):
            raise ExportContractError(f"Export contract {contract_path} must be a mapping with a 'types' list")
        
        try:
            types = []
            for type_data in contract_data.get('types') or []:
                fields = [
                    FieldMapping(
                        slot=field_data.get('slot', ''),
                        type=field_data.get('type', ''),
                        name=field_data.get('name', '')
                    )
                    for field_data in type_data.get('fields') or []
                ]
                types.append(TypeMapping(class_path=type_data.get('class', ''), fields=fields))
        except (AttributeError, TypeError, ValueError) as e:
            raise ExportContractError(f"Failed to parse export contract from {contract_path}: {e}")
        
        seen = set()
        for type_mapping in types:
            if type_mapping.class_path in seen:
                raise ExportContractError(f"Duplicate type in export contract {contract_path}: "
                                          f"{type_mapping.class_path}")
            seen.add(type_mapping.class_path)
            slots = [field_mapping.slot for field_mapping in type_mapping.fields]
            if len(slots) != len(set(slots)):
                raise ExportContractError(f"Duplicate slot for {type_mapping.class_path} "
                                          f"in export contract {contract_path}")
        
        return ExportContract(types=types, source_path=contract_path)
    
    def _resolve_class(self, class_path: str) -> type:
        """Import ``package.module:Qualified.Name`` and return the class."""
        module_name, _, qualname = class_path.partition(':')
        try:
            target = importlib.import_module(module_name)
        except ImportError as e:
            raise ExportContractError(f"Cannot import module '{module_name}' for {class_path}: {e}")
        
        for part in qualname.split('.'):
            try:
                target = getattr(target, part)
            except AttributeError:
                raise ExportContractError(f"'{qualname}' not found in module '{module_name}'")
        
        if not isinstance(target, type):
            raise ExportContractError(f"{class_path} does not name a class")
        return target


# Global configuration manager instance
_global_config_manager: Optional[ConfigManager] = None


def get_config_manager(base_config_path: Optional[Union[str, Path]] = None) -> ConfigManager:
    """
    Get the global configuration manager instance.
    
    Args:
        base_config_path: Base path for configuration files (only used on first call)
        
    Returns:
        Global ConfigManager instance
    """
    global _global_config_manager
    
    if _global_config_manager is None:
        _global_config_manager = ConfigManager(base_config_path)
    
    return _global_config_manager


def reset_config_manager() -> None:
    """Reset the global configuration manager instance."""
    global _global_config_manager
    _global_config_manager = None
