"""
Host qualification feature package.

This vertical slice keeps every layer related to selecting the eligible
hosts of a booking co-located (domain models, pipeline helpers,
collaborators, the orchestrating service and the API router).
"""

# Re-export the primary building blocks for easy access.
from .api.router import router as host_qualification_router  # noqa: F401
from .domain.models import EventType, Host, QualificationResult, User  # noqa: F401
from .services.qualified_hosts_service import QualifiedHostsService  # noqa: F401
