"""Collaborator clients.

Barrel export for the HTTP document sources.
"""

from .clients import (
    HttpSource,
    WiktionaryClient,
    EtymonlineClient,
    DictionaryClient,
    parse_dictionary_entry,
)

__all__ = [
    "HttpSource",
    "WiktionaryClient",
    "EtymonlineClient",
    "DictionaryClient",
    "parse_dictionary_entry",
]
