from linkresolver.services.resolution_service import ResolutionService
from linkresolver.services.factory import build_resolution_service


__all__ = [
    'ResolutionService',
    'build_resolution_service',
]
