"""Test suite for the todo datastore.

This package contains tests for the id counter, the one-file-per-record store,
the protocol definitions and the configuration factory.
"""
