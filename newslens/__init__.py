"""Query-focused news analytics: aliases, relevance, targeted sentiment, aggregation."""

__version__ = "0.1.0"
