"""Salesboard CLI command groups."""
