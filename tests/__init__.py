"""Test suite for the envbind package.

This package contains unit and integration tests validating binding
contexts, leaf parsers, recursive resolution of nested structures,
usage rendering and the command-line interface.
"""
