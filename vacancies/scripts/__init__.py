"""Maintenance and development scripts."""
