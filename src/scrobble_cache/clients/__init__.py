"""Outbound HTTP clients for the upstream music APIs."""

from .httpx_client import HttpxUpstreamClient

__all__ = ["HttpxUpstreamClient"]
