"""
credlify test suite
===================

Test Modules
------------
- test_substitution.py: Placeholder substitution
- test_models.py: Pydantic models and path helpers
- test_store.py: Template enumeration and loading
- test_config_loader.py: Project paths from the config template
- test_materializer.py: Collision scan, directories and file writes
- test_manifest.py: package.json discovery and patching
- test_licenses.py: License text lookup
- test_installer.py: npm dependency installation
- test_generator.py: End-to-end scaffolding runs
- test_cli.py: Command-line interface

Running Tests
-------------
    # Run all tests
    pytest

    # Run specific module
    pytest tests/test_materializer.py

    # Run specific test class
    pytest tests/test_materializer.py::TestCollisionScan
"""
