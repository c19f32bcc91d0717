"""
HTTP library adapters for resolved proxy configurations.
"""
from .adapter_httpx import HttpxAdapter, bypass_pattern, proxy_url

__all__ = ["HttpxAdapter", "bypass_pattern", "proxy_url"]
