"""Per-article processing: summary, keywords, normalization, dedup."""
