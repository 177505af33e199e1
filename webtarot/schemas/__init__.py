"""Marshmallow request schemas."""
