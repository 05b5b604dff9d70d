from .factory import ConnectionFactory

__all__ = ['ConnectionFactory']
