"""Backend clients for the catalog sources."""

from kompass.clients.cluster import ClusterClient
from kompass.clients.registry import RegistryClient

__all__ = ["ClusterClient", "RegistryClient"]
