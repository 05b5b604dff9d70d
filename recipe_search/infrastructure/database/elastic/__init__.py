from .fulltext_backend import FullTextBackend

__all__ = ['FullTextBackend']
