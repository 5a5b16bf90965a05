"""
Drawing package
---------------
Overlay annotations injected into the page by a Session.
"""

from .annotations import DrawingMixin, random_id
from .scripts import ID_PREFIX

__all__ = [
    "DrawingMixin",
    "random_id",
    "ID_PREFIX",
]
