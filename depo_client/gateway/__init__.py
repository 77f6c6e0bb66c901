"""Remote Command Gateway — typed boundary to the manifest backend."""

from depo_client.gateway.base import CommandGateway, GatewayError

__all__ = ["CommandGateway", "GatewayError"]
