"""BaseService — foundation for themeguard services.

Every service receives a :class:`Workspace` at construction time. The
workspace provides the compiler and import resolvers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from themeguard.config.settings import ThemeguardSettings
    from themeguard.infrastructure.workspace import Workspace


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class ThemeCheckService(BaseService):
            def check_scope(self, ...) -> ServiceResult:
                css = self._workspace.compile(source)
                ...
    """

    def __init__(self, workspace: Workspace) -> None:
        self._workspace = workspace

    @property
    def settings(self) -> ThemeguardSettings:
        return self._workspace.settings
