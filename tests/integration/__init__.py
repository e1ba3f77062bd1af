"""Integration tests for visio-link-checker.

These tests run the check and update workflows end to end against packages
built in temporary directories. HTTP is patched at the requests.Session level,
so no network access is needed.
"""
