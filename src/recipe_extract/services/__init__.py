"""Services package for recipe_extract.

This package contains the dependency injection container that builds the
pipeline's collaborators from one configuration.

Modules:
    factory: ServiceFactory for centralized dependency management
"""

from .factory import ServiceFactory

__all__ = ["ServiceFactory"]
