"""Packaged default YAML files (settings, organizations, forms)."""
