"""Test suite for the author-dsl package.

This package contains unit and integration tests validating
line classification, block and multiline handling, value processing,
the plugin registry and pipeline, built-in plugins and the command line.
"""
