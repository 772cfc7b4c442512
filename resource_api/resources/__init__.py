"""
Resources
=========

Resource definitions served by the generic controller and router.
Adding a resource means adding a definition module and listing it here.
"""

from resource_api.resources.base import ResourceDefinition
from resource_api.resources.order import ORDER

RESOURCES = (ORDER,)

__all__ = ["ORDER", "RESOURCES", "ResourceDefinition"]
