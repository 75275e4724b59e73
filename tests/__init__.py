"""
Test suite for Clinic Queue Scheduling.

Contains unit tests for the availability engine and integration tests
for the services and HTTP API.
"""
import os

# Set environment for testing
os.environ["TESTING"] = "1"
