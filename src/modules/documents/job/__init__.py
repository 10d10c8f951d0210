from .auto_expire import start_expiration_job

__all__ = ['start_expiration_job']
