from typing import Dict, Any


def _keyword_with_text(ignore_above: int = 1024) -> Dict[str, Any]:
    return {
        "type": "keyword",
        "ignore_above": ignore_above,
        "fields": {
            "text": {
                "type": "text",
                "analyzer": "catalog_text_analyzer"
            }
        }
    }


class CatalogIndexConfig:
    """OpenSearch index configuration for catalog documents."""

    @staticmethod
    def get_index_mapping(number_of_shards: int = 1, number_of_replicas: int = 0) -> Dict[str, Any]:
        """Get complete OpenSearch index configuration including settings and mappings.

        Substring matching uses case-insensitive wildcard queries, so every field
        searched that way is a keyword. Attributes are nested so that a filter
        matches key and value on the same attribute element.
        """
        return {
            "settings": {
                "number_of_shards": number_of_shards,
                "number_of_replicas": number_of_replicas,
                "analysis": {
                    "analyzer": {
                        "catalog_text_analyzer": {
                            "type": "custom",
                            "tokenizer": "standard",
                            "filter": [
                                "lowercase"
                            ]
                        }
                    }
                }
            },
            "mappings": {
                "properties": {
                    "business_id": {
                        "type": "keyword"
                    },
                    "tenant_id": {
                        "type": "keyword"
                    },
                    "display_name": _keyword_with_text(),
                    "category": _keyword_with_text(),
                    "attributes": {
                        "type": "nested",
                        "properties": {
                            "key": {"type": "keyword"},
                            "original_key": {"type": "keyword"},
                            "value": _keyword_with_text(),
                            "type": {"type": "keyword"},
                            "numeric_value": {"type": "double"},
                            "range_min": {"type": "double"},
                            "range_max": {"type": "double"},
                            "boolean_value": {"type": "boolean"},
                            "unit": {"type": "keyword"},
                            "searchable": {"type": "boolean"}
                        }
                    },
                    "raw_text": {
                        "type": "text",
                        "analyzer": "catalog_text_analyzer"
                    },
                    "search_tokens": {
                        "type": "keyword",
                        "ignore_above": 8191
                    },
                    "normalized_tokens": {
                        "type": "keyword"
                    },
                    "source_metadata": {
                        "properties": {
                            "file_name": {"type": "keyword"},
                            "file_kind": {"type": "keyword"},
                            "row_number": {"type": "integer"},
                            "uploaded_by": {"type": "keyword"},
                            "uploaded_at": {
                                "type": "date",
                                "format": "strict_date_optional_time||epoch_millis"
                            },
                            "header_map": {
                                "type": "object",
                                "enabled": False
                            }
                        }
                    },
                    "is_deleted": {
                        "type": "boolean"
                    },
                    "deleted_at": {
                        "type": "date",
                        "format": "strict_date_optional_time||epoch_millis"
                    },
                    "created_at": {
                        "type": "date",
                        "format": "strict_date_optional_time||epoch_millis"
                    },
                    "created_by": {
                        "type": "keyword"
                    },
                    "last_modified_at": {
                        "type": "date",
                        "format": "strict_date_optional_time||epoch_millis"
                    },
                    "last_modified_by": {
                        "type": "keyword"
                    }
                }
            }
        }
