"""Elasticsearch client construction helpers."""

from __future__ import annotations

from elasticsearch import Elasticsearch

from resources.substrates.elasticsearch.config import ElasticsearchSettings


def create_elasticsearch_client(settings: ElasticsearchSettings) -> Elasticsearch:
    """Construct a configured synchronous Elasticsearch client."""
    basic_auth = (
        (settings.username, settings.password) if settings.username else None
    )
    return Elasticsearch(
        hosts=[settings.url],
        basic_auth=basic_auth,
        verify_certs=settings.verify_certs,
        request_timeout=settings.request_timeout_seconds,
    )
