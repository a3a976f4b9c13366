"""Clients for external API interactions."""
from skillbridge.clients.geocoding_client import GeocodingClient
from skillbridge.clients.openai_client import OpenAIClient

__all__ = ["GeocodingClient", "OpenAIClient"]
