"""
Tests for the centralized ConfigManager.

This module tests the centralized configuration management system
to ensure it properly handles environment variables, export contracts,
caching and registration of contract types.
"""

import json
import logging
import os
import tempfile
import unittest
from pathlib import Path

from xml_exporter.config.config_manager import (
    ConfigManager,
    get_config_manager,
    reset_config_manager,
    ExportParameters,
    ConfigPaths
)
from xml_exporter.config.export_defaults import ExportDefaults
from xml_exporter.exceptions import ConfigurationError, ExportContractError
from xml_exporter.markers import ExportRegistry
from xml_exporter.models import FieldOrder, NullValuePolicy, XMLField
from xml_exporter.samples import Student


ENV_VARS = [
    'XML_EXPORTER_OUTPUT_FILE',
    'XML_EXPORTER_ENCODING',
    'XML_EXPORTER_NULL_POLICY',
    'XML_EXPORTER_ESCAPE_VALUES',
    'XML_EXPORTER_FIELD_ORDER',
    'XML_EXPORTER_CREATE_DIRS',
    'XML_EXPORTER_CONFIG_PATH',
    'XML_EXPORTER_CONTRACT_PATH'
]


def clear_environment():
    for var in ENV_VARS:
        if var in os.environ:
            del os.environ[var]


class TestExportParameters(unittest.TestCase):
    """Test ExportParameters class."""
    
    def setUp(self):
        """Set up test environment."""
        clear_environment()
    
    def tearDown(self):
        clear_environment()
    
    def test_default_parameters(self):
        """Test default export parameters."""
        params = ExportParameters.from_environment()
        
        self.assertEqual(params.output_file, ExportDefaults.OUTPUT_FILE)
        self.assertEqual(params.encoding, "utf-8")
        self.assertEqual(params.null_policy, "empty")
        self.assertFalse(params.escape_values)
        self.assertEqual(params.field_order, "declaration")
        self.assertFalse(params.create_dirs)
    
    def test_environment_variable_override(self):
        """Test export parameters from environment variables."""
        os.environ['XML_EXPORTER_OUTPUT_FILE'] = 'people.xml'
        os.environ['XML_EXPORTER_NULL_POLICY'] = 'SKIP'
        os.environ['XML_EXPORTER_ESCAPE_VALUES'] = 'true'
        os.environ['XML_EXPORTER_FIELD_ORDER'] = 'name'
        
        params = ExportParameters.from_environment()
        
        self.assertEqual(params.output_file, 'people.xml')
        self.assertEqual(params.null_policy, 'skip')
        self.assertTrue(params.escape_values)
        self.assertEqual(params.field_order, 'name')


class TestConfigPaths(unittest.TestCase):
    """Test ConfigPaths class."""
    
    def setUp(self):
        clear_environment()
    
    def tearDown(self):
        clear_environment()
    
    def test_default_paths(self):
        paths = ConfigPaths.from_environment()
        
        self.assertEqual(paths.base_config_path, Path.cwd())
        self.assertIsNone(paths.contract_path)
    
    def test_environment_paths(self):
        os.environ['XML_EXPORTER_CONFIG_PATH'] = '/tmp'
        os.environ['XML_EXPORTER_CONTRACT_PATH'] = 'contract.json'
        
        paths = ConfigPaths.from_environment()
        
        self.assertEqual(paths.base_config_path, Path('/tmp'))
        self.assertEqual(paths.contract_path, 'contract.json')
    
    def test_explicit_base_path_wins(self):
        os.environ['XML_EXPORTER_CONFIG_PATH'] = '/tmp'
        
        paths = ConfigPaths.from_environment('/opt')
        
        self.assertEqual(paths.base_config_path, Path('/opt'))


class TestConfigManager(unittest.TestCase):
    """Test ConfigManager class."""
    
    def setUp(self):
        """Set up test environment."""
        clear_environment()
        reset_config_manager()
        
        self.temp_dir = tempfile.TemporaryDirectory()
        self.temp_path = Path(self.temp_dir.name)
        self.contract = {
            "types": [
                {
                    "class": "xml_exporter.samples:Student",
                    "fields": [
                        {"slot": "first_name", "type": "String", "name": "given"},
                        {"slot": "age", "type": "int"}
                    ]
                }
            ]
        }
        self._write_json("contract.json", self.contract)
        self.config_manager = ConfigManager(self.temp_path)
    
    def tearDown(self):
        self.temp_dir.cleanup()
        clear_environment()
        reset_config_manager()
    
    def _write_json(self, name, data):
        path = self.temp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path
    
    def test_get_export_config(self):
        config = self.config_manager.get_export_config()
        
        self.assertEqual(config.encoding, "utf-8")
        self.assertIs(config.null_policy, NullValuePolicy.EMPTY)
        self.assertIs(config.field_order, FieldOrder.DECLARATION)
        self.assertFalse(config.escape_values)
    
    def test_non_utf8_encoding_rejected(self):
        self.config_manager.export_params.encoding = "latin-1"
        
        with self.assertRaises(ConfigurationError) as context:
            self.config_manager.get_export_config()
        self.assertIn("must be UTF-8", str(context.exception))
        
        with self.assertRaises(ConfigurationError):
            self.config_manager.validate_configuration()
    
    def test_utf8_encoding_aliases_accepted(self):
        os.environ['XML_EXPORTER_ENCODING'] = "UTF8"
        self.config_manager.reload_configuration()
        
        self.assertEqual(self.config_manager.get_export_config().encoding, "UTF8")
        self.assertTrue(self.config_manager.validate_configuration())
    
    def test_invalid_null_policy_raises_configuration_error(self):
        self.config_manager.export_params.null_policy = "explode"
        
        with self.assertRaises(ConfigurationError):
            self.config_manager.get_export_config()
    
    def test_load_json_contract(self):
        contract = self.config_manager.load_export_contract("contract.json")
        
        self.assertEqual(contract.source_path, "contract.json")
        self.assertEqual(len(contract.types), 1)
        self.assertEqual(contract.types[0].class_path, "xml_exporter.samples:Student")
        self.assertEqual([f.slot for f in contract.types[0].fields], ["first_name", "age"])
        self.assertEqual(contract.types[0].fields[1].name, "")
    
    def test_load_yaml_contract(self):
        (self.temp_path / "contract.yaml").write_text(
            "types:\n"
            "  - class: xml_exporter.samples:Student\n"
            "    fields:\n"
            "      - slot: last_name\n"
            "        type: String\n"
            "        name:\n",
            encoding="utf-8"
        )
        
        contract = self.config_manager.load_export_contract("contract.yaml")
        
        self.assertEqual(contract.types[0].fields[0].slot, "last_name")
        self.assertEqual(contract.types[0].fields[0].name, "")
    
    def test_contract_is_cached(self):
        first = self.config_manager.load_export_contract("contract.json")
        self.assertIs(self.config_manager.load_export_contract("contract.json"), first)
        
        self.config_manager.clear_cache()
        self.assertIsNot(self.config_manager.load_export_contract("contract.json"), first)
    
    def test_configured_contract_path_used_by_default(self):
        self.config_manager.paths.contract_path = "contract.json"
        
        contract = self.config_manager.load_export_contract()
        
        self.assertEqual(contract.source_path, "contract.json")
    
    def test_no_contract_path_configured(self):
        with self.assertRaises(ConfigurationError):
            self.config_manager.load_export_contract()
    
    def test_missing_contract_file(self):
        with self.assertRaises(ConfigurationError):
            self.config_manager.load_export_contract("missing.json")
    
    def test_unsupported_contract_format(self):
        (self.temp_path / "contract.txt").write_text("types: []", encoding="utf-8")
        
        with self.assertRaises(ExportContractError):
            self.config_manager.load_export_contract("contract.txt")
    
    def test_malformed_json_contract(self):
        (self.temp_path / "broken.json").write_text("{not json", encoding="utf-8")
        
        with self.assertRaises(ExportContractError):
            self.config_manager.load_export_contract("broken.json")
    
    def test_contract_structure_errors(self):
        invalid_contracts = {
            "list.json": [],
            "no_colon.json": {"types": [{"class": "xml_exporter.samples.Student"}]},
            "no_type.json": {"types": [{"class": "a:B", "fields": [{"slot": "x"}]}]},
            "duplicate_type.json": {"types": [{"class": "a:B"}, {"class": "a:B"}]},
            "duplicate_slot.json": {"types": [{"class": "a:B", "fields": [
                {"slot": "x", "type": "int"}, {"slot": "x", "type": "int"}]}]},
        }
        for name, data in invalid_contracts.items():
            self._write_json(name, data)
            with self.subTest(contract=name):
                with self.assertRaises(ExportContractError):
                    self.config_manager.load_export_contract(name)
    
    def test_apply_contract_registers_types(self):
        registry = ExportRegistry()
        contract = self.config_manager.load_export_contract("contract.json")
        
        registered = self.config_manager.apply_export_contract(contract, registry)
        
        self.assertEqual(registered, 1)
        self.assertEqual(registry.fields_for(Student), {
            "first_name": XMLField(type="String", name="given"),
            "age": XMLField(type="int")
        })
    
    def test_apply_contract_with_unknown_module(self):
        self._write_json("bad_module.json", {"types": [{"class": "no_such_module_xyz:Thing"}]})
        contract = self.config_manager.load_export_contract("bad_module.json")
        
        with self.assertRaises(ExportContractError):
            self.config_manager.apply_export_contract(contract, ExportRegistry())
    
    def test_apply_contract_with_non_class(self):
        self._write_json("not_class.json", {"types": [{"class": "xml_exporter.samples:build_sample_people"}]})
        contract = self.config_manager.load_export_contract("not_class.json")
        
        with self.assertRaises(ExportContractError):
            self.config_manager.apply_export_contract(contract, ExportRegistry())
    
    def test_validate_configuration(self):
        self.assertTrue(self.config_manager.validate_configuration())
    
    def test_validate_configuration_collects_errors(self):
        self.config_manager.export_params.encoding = "no-such-encoding"
        self.config_manager.paths.contract_path = "missing.json"
        
        with self.assertRaises(ConfigurationError) as context:
            self.config_manager.validate_configuration()
        
        message = str(context.exception)
        self.assertIn("Unknown output encoding", message)
        self.assertIn("Export contract file does not exist", message)
    
    def test_configuration_summary(self):
        summary = self.config_manager.get_configuration_summary()
        
        self.assertEqual(summary['export']['null_policy'], 'empty')
        self.assertEqual(summary['paths']['base_config_path'], str(self.temp_path))
    
    def test_reload_configuration(self):
        os.environ['XML_EXPORTER_NULL_POLICY'] = 'error'
        
        self.config_manager.reload_configuration()
        
        self.assertIs(self.config_manager.get_export_config().null_policy, NullValuePolicy.ERROR)
    
    def test_global_config_manager(self):
        manager = get_config_manager(self.temp_path)
        
        self.assertIs(get_config_manager(), manager)
        reset_config_manager()
        self.assertIsNot(get_config_manager(self.temp_path), manager)


class TestExportDefaults(unittest.TestCase):
    """Test ExportDefaults class."""
    
    def test_to_dict_contains_only_constants(self):
        defaults = ExportDefaults.to_dict()
        
        self.assertEqual(defaults['OUTPUT_FILE'], 'output.xml')
        self.assertNotIn('to_dict', defaults)
    
    def test_log_summary_uses_logger(self):
        with self.assertLogs('xml_exporter.test_defaults', level='INFO') as logs:
            ExportDefaults.log_summary(logging.getLogger('xml_exporter.test_defaults'))
        
        self.assertIn('NULL_POLICY: empty', logs.output[0])


if __name__ == '__main__':
    unittest.main()
