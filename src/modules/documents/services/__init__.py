from .cleanup import expire_overdue_invitations
from .document_service import DocumentService
from .finalization_service import FinalizationService, FinalizationStatus
from .invitation_service import InvitationService

__all__ = [
    'expire_overdue_invitations', 'DocumentService', 'FinalizationService',
    'FinalizationStatus', 'InvitationService'
]
