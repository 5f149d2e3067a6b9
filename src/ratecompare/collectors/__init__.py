"""Readers for usage exports and external weather data."""
