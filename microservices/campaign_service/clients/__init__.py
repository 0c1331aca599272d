"""
Campaign Service Clients

Clients for calling other microservices.
"""

from .integration_client import IntegrationClient

__all__ = [
    "IntegrationClient",
]
