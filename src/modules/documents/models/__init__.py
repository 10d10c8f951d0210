from .user import User
from .document import Document, DocumentStatus
from .invitation import Invitation, InvitationStatus

__all__ = ['User', 'Document', 'DocumentStatus', 'Invitation', 'InvitationStatus']

# User.notifications necesita el modelo registrado
from modules.notifications.models.notification import Notification  # noqa: E402,F401
