"""Bundled data files for cleaninstall."""
