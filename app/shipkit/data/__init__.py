"""Bundled data files for shipkit."""
