"""Shared helpers for hilly-sounds tests."""


def circular_distance(a, b):
    """Distance between two samples measured around the hue wheel."""
    d = abs(a - b) % 65536
    return min(d, 65536 - d)
