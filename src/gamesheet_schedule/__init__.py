"""Fetch a GameSheet league schedule and publish it as JSON + ICS."""

__version__ = "0.1.0"
