"""
Web boundary layer.

Page fetching and HTML extraction for ingestion.
"""

from kb_assistant.boundary.web.crawler import CrawledPage, PageFetcher

__all__ = ["CrawledPage", "PageFetcher"]
