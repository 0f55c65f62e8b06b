"""Bundled data files for fsctl."""
