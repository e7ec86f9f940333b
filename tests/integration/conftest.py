"""Shared fixtures for integration tests.

Network tests are gated per module with ``pytestmark`` on
``RUN_NTAPI_NETWORK_TESTS=1``.
"""
