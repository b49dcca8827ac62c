"""Clients for the external collaborators: record store, build service, text generation."""

from .airtable_client import AirtableClient, Record
from .build_client import BuildServiceClient
from .openai_client import TextGenerationClient

__all__ = [
    'AirtableClient',
    'Record',
    'BuildServiceClient',
    'TextGenerationClient',
]
