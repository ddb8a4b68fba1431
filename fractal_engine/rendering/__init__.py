"""Colour mapping and image export."""
