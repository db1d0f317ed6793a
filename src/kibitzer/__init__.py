"""Kibitzer — play chess against a remote engine and watch its log."""

__version__ = "0.1.0"
