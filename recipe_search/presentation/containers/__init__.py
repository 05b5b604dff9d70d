from .search_container import SearchContainer

__all__ = ['SearchContainer']
