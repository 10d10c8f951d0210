class DocumentNotFoundError(Exception):
    """El documento no existe (o el usuario no puede verlo)"""
    pass

class FinalizationError(Exception):
    """El documento no puede finalizarse en su estado actual"""
    pass

class InvitationError(Exception):
    """Solicitud de invitación o enlace de firma no válido"""
    pass

class InvitationNotFoundError(InvitationError):
    pass
