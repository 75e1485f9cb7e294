"""Bundled scenario and client catalog."""
