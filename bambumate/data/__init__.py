"""Packaged rule tables."""
