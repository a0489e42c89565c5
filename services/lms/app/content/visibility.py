"""
Two-tier access gate for course content.

Tier 1 (module visibility):  owner/admin, or the module is published.
Tier 2 (lecture access):     owner/admin, or enrolled AND module published
                             AND lecture published.

Pure functions; the caller resolves who the viewer is.
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Viewer:
    is_owner: bool = False
    is_admin: bool = False
    is_enrolled: bool = False

    @property
    def can_edit(self) -> bool:
        return self.is_owner or self.is_admin


def is_module_visible(viewer: Viewer, module_published: bool) -> bool:
    return viewer.can_edit or module_published


def can_access_lecture(viewer: Viewer, module_published: bool, lecture_published: bool) -> bool:
    return viewer.can_edit or (viewer.is_enrolled and module_published and lecture_published)
