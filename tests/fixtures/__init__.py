"""Shared test data for mapbox_sdk tests."""
