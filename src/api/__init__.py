"""REST API for the adaptive learning service."""
