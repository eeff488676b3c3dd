from .adapter import WebApiAdapter
from .config import WebApiConfig

__all__ = ["WebApiAdapter", "WebApiConfig"]
