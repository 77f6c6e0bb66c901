"""Wire models shared by the gateway and the services."""

from depo_client.models.dependency import DependencyRecord, dependency_map, dependency_records

__all__ = ["DependencyRecord", "dependency_map", "dependency_records"]
