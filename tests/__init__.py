"""
Test suite for the Contentful importer.

Run all tests: pytest
Run with coverage: pytest --cov=. --cov-report=html
Run unit tests only: pytest tests/unit/
Run specific file: pytest tests/unit/test_entry_builder_service.py -v
"""
