"""Service layer for slugpush"""

from .deploy_service import DeployService

__all__ = [
    'DeployService',
]
