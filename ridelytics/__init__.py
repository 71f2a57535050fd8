"""Ridelytics backend: geofenced sponsored-business matching for riders."""
