"""Elasticsearch substrate for the device search index."""

from resources.substrates.elasticsearch.config import (
    RESOURCE_COMPONENT_ID,
    ElasticsearchSettings,
    resolve_elasticsearch_settings,
)
from resources.substrates.elasticsearch.elasticsearch_substrate import (
    ElasticsearchClientSubstrate,
)
from resources.substrates.elasticsearch.substrate import ElasticsearchSubstrate

__all__ = [
    "RESOURCE_COMPONENT_ID",
    "ElasticsearchClientSubstrate",
    "ElasticsearchSettings",
    "ElasticsearchSubstrate",
    "resolve_elasticsearch_settings",
]
