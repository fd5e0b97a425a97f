"""Cross-module geocoding tests."""
