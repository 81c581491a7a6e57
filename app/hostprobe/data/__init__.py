"""Bundled data files for hostprobe."""
