"""Adapters for the filesystem, subprocesses and network."""
