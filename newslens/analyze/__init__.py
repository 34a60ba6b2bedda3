"""Query-aware analysis: aliases, relevance, targeted sentiment, aggregation."""
