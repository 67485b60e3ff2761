"""Test package for the Sleeper fantasy API."""
