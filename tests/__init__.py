"""Tests for mapbox_sdk."""
