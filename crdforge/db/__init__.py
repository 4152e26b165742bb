"""Database models.

Session management is imported from :mod:`crdforge.db.session`.
"""

from crdforge.db.models import ManifestRow, TemplateRow

__all__ = [
    "TemplateRow",
    "ManifestRow",
]
