"""Tracks whether the input method server is present on a bus."""

from __future__ import annotations

from .proxies import BusConnection, Signal

MAIN_SERVICE_NAME = "org.fcitx.Fcitx5"
PORTAL_SERVICE_NAME = "org.freedesktop.portal.Fcitx"


class Watcher:
    """Follows the server's well-known names and reports availability.

    ``availability_changed`` is emitted with the new value whenever the
    server appears or disappears while the watcher is watching.
    """

    def __init__(self, connection: BusConnection, watch_portal: bool = False) -> None:
        self.connection = connection
        self.watch_portal = watch_portal
        self.availability_changed = Signal()
        self._available = False
        self._main_present = False
        self._portal_present = False
        self._watched_connection: BusConnection | None = None

    def watch(self) -> None:
        """Start following the server names; does nothing if already watching."""
        if self._watched_connection is not None:
            return
        connection = self.connection
        connection.name_owner_changed.connect(self.on_name_owner_changed)
        if connection.is_service_registered(MAIN_SERVICE_NAME):
            self._main_present = True
        if self.watch_portal and connection.is_service_registered(PORTAL_SERVICE_NAME):
            self._portal_present = True
        self._update_availability()
        self._watched_connection = connection

    def unwatch(self) -> None:
        """Stop following the server names and drop availability."""
        connection = self._watched_connection
        if connection is None:
            return
        connection.name_owner_changed.disconnect(self.on_name_owner_changed)
        self._main_present = False
        self._portal_present = False
        self._watched_connection = None
        self._update_availability()

    def is_watching(self) -> bool:
        return self._watched_connection is not None

    def availability(self) -> bool:
        return self._available

    def service_name(self) -> str:
        """The name to reach the server by, preferring the main service."""
        if self._main_present:
            return MAIN_SERVICE_NAME
        if self._portal_present:
            return PORTAL_SERVICE_NAME
        return ""

    def on_name_owner_changed(self, service: str, old_owner: str, new_owner: str) -> None:
        """Update presence from a change of owner of ``service``."""
        if service == MAIN_SERVICE_NAME:
            self._main_present = bool(new_owner)
        elif service == PORTAL_SERVICE_NAME and self.watch_portal:
            self._portal_present = bool(new_owner)
        else:
            return
        self._update_availability()

    def _update_availability(self) -> None:
        available = self._main_present or self._portal_present
        if available != self._available:
            self._available = available
            self.availability_changed.emit(available)