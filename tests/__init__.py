# Online Voting Test Suite
"""
Test suite for the online voting application.

Key principle: Test through the HTTP API, with service and repository
tests for rules that are awkward to reach over HTTP.
"""
