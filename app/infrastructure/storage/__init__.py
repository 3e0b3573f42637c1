"""オブジェクトストレージ"""

from .base import ObjectStore
from .opendal_store import OpendalObjectStore

__all__ = ["ObjectStore", "OpendalObjectStore"]
