"""
Service layer: lazily loaded catalogs and the per-request browsing session.
"""

from .browser_session import BrowserSession, SignalPage
from .dataset_service import DatasetManager

__all__ = ["BrowserSession", "SignalPage", "DatasetManager"]
