"""Picfeed: a photo-sharing service with batched feed assembly."""

__version__ = "0.1.0"
