from .files import FileManager
from .cache import CacheManager

__all__ = ["FileManager", "CacheManager"]
