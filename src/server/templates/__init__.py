"""
App Catalog Page Templates

Provides HTML template loading and rendering for the catalog pages.
"""

from .loader import TemplateLoader

__all__ = ["TemplateLoader"]
