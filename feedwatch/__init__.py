"""Feedwatch - track subscribed web feeds and report new posts."""

__version__ = "1.0.0"
