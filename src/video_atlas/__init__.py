"""Video Atlas - channel video aggregation, enrichment and caching."""

__version__ = "0.1.0"
