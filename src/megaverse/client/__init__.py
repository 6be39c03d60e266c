from megaverse.client._retry import RetryPolicy
from megaverse.client.client import MegaverseClient, classify_response

__all__ = ["MegaverseClient", "RetryPolicy", "classify_response"]
