"""Venue lookup module."""

from .foursquare import IVenueClient, Venue, VenueClient

__all__ = ["IVenueClient", "Venue", "VenueClient"]
