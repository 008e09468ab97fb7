"""
Unit tests for __init__.py files

This module provides tests for package initialization files to ensure:
- Version attributes are defined
- __all__ exports resolve
- Subpackages import without errors
"""

import importlib

import pytest


class TestSheetreconInit:
    """Test sheetrecon/__init__.py"""

    def test_version_attribute_exists(self):
        import sheetrecon

        assert sheetrecon.__version__ == "1.0.0"

    def test_all_exports_resolve(self):
        import sheetrecon

        for name in sheetrecon.__all__:
            assert getattr(sheetrecon, name) is not None


@pytest.mark.parametrize("module_name", [
    "sheetrecon.compare",
    "sheetrecon.split",
    "sheetrecon.report",
    "sheetrecon.cli",
    "sheetrecon.utils.logging",
    "sheetrecon.utils.metrics",
    "sheetrecon.utils.tracing",
])
def test_subpackage_exports(module_name):
    """Test every name in a subpackage's __all__ is importable"""
    module = importlib.import_module(module_name)

    for name in module.__all__:
        assert hasattr(module, name), f"{module_name}.{name} missing"
