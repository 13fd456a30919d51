"""
Test suite for parse-schema.

This package contains:
- Unit tests for individual components
- End-to-end tests for complete schema workflows
"""
