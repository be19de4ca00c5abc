"""
Shopvid Metrics

Packages:
- common: configuration, logging and canonical data models
- analytics: upstream client, normalization, mock fallback and service
"""

__version__ = "0.1.0"
