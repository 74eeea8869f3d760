"""A client input context that follows the server across restarts."""

from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import PurePath

from .proxies import BusError, InputContextInterface, InputMethodProxy, Signal
from .types import StringKeyValue
from .watcher import Watcher

INPUT_METHOD_PATH = "/org/freedesktop/portal/inputmethod"
RECHECK_DELAY = 0.1

Scheduler = Callable[[float, Callable[[], None]], None]


def _run_now(delay: float, callback: Callable[[], None]) -> None:
    callback()


def _program_name() -> str:
    return PurePath(sys.argv[0]).name if sys.argv and sys.argv[0] else ""


class InputContextProxy:
    """An input context created on the server whenever it is available.

    ``scheduler`` is called with a delay in seconds and a callback to run
    the availability recheck; by default the recheck runs at once.
    """

    def __init__(
        self,
        watcher: Watcher,
        *,
        display: str = "",
        program: str | None = None,
        scheduler: Scheduler | None = None,
    ) -> None:
        self.display = display
        self.program = _program_name() if program is None else program
        self._watcher = watcher
        self._schedule = scheduler or _run_now
        self._improxy: InputMethodProxy | None = None
        self._icproxy: InputContextInterface | None = None
        self._owner_connection = None
        self._watched: set[str] = set()

        self.commit_string = Signal()
        self.current_im = Signal()
        self.delete_surrounding_text = Signal()
        self.forward_key = Signal()
        self.update_formatted_preedit = Signal()
        self.update_client_side_ui = Signal()
        self.input_context_created = Signal()

        watcher.availability_changed.connect(self._on_availability_changed)
        self._availability_changed()

    def is_valid(self) -> bool:
        return self._icproxy is not None and self._icproxy.is_valid()

    def recheck(self) -> None:
        """Create the input context if possible, drop it if the server is gone."""
        if not self.is_valid() and self._watcher.availability():
            self._create_input_context()
        if not self._watcher.availability():
            self._clean_up()

    def on_service_unregistered(self, name: str) -> None:
        """React to the server's connection leaving the bus."""
        self._clean_up()
        self._availability_changed()

    def close(self) -> None:
        """Destroy the input context on the server and stop following it."""
        if self.is_valid():
            try:
                self._icproxy.destroy_ic()
            except BusError:
                pass
        self._clean_up()
        try:
            self._watcher.availability_changed.disconnect(self._on_availability_changed)
        except ValueError:
            pass

    def __enter__(self) -> InputContextProxy:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _on_availability_changed(self, available: bool) -> None:
        self._availability_changed()

    def _availability_changed(self) -> None:
        self._schedule(RECHECK_DELAY, self.recheck)

    def _on_owner_changed(self, name: str, old_owner: str, new_owner: str) -> None:
        if name in self._watched and not new_owner:
            self.on_service_unregistered(name)

    def _clean_up(self) -> None:
        if self._owner_connection is not None:
            self._owner_connection.name_owner_changed.disconnect(self._on_owner_changed)
            self._owner_connection = None
        self._watched.clear()
        if self._improxy is not None:
            self._improxy.close()
            self._improxy = None
        if self._icproxy is not None:
            self._icproxy.close()
            self._icproxy = None

    def _create_input_context(self) -> None:
        if not self._watcher.availability():
            return
        self._clean_up()

        service = self._watcher.service_name()
        connection = self._watcher.connection
        owner = connection.service_owner(service)
        if not owner:
            return

        connection.name_owner_changed.connect(self._on_owner_changed)
        self._owner_connection = connection
        self._watched = {owner}
        # The owner may have left between the two queries.
        if not connection.is_service_registered(owner):
            self._clean_up()
            return

        self._improxy = InputMethodProxy(owner, INPUT_METHOD_PATH, connection)
        args = [StringKeyValue("program", self.program)]
        if self.display:
            args.append(StringKeyValue("display", self.display))
        try:
            path, uuid = self._improxy.create_input_context(args)
        except BusError:
            self._clean_up()
            return

        icproxy = InputContextInterface(
            self._improxy.service, path, self._improxy.connection
        )
        icproxy.commit_string.connect(self.commit_string.emit)
        icproxy.current_im.connect(self.current_im.emit)
        icproxy.delete_surrounding_text.connect(self.delete_surrounding_text.emit)
        icproxy.forward_key.connect(self.forward_key.emit)
        icproxy.update_formatted_preedit.connect(self.update_formatted_preedit.emit)
        icproxy.update_client_side_ui.connect(self.update_client_side_ui.emit)
        self._icproxy = icproxy
        self.input_context_created.emit(uuid)

    def _context(self) -> InputContextInterface:
        if self._icproxy is None:
            raise RuntimeError("input context is not available")
        return self._icproxy

    def focus_in(self) -> None:
        self._context().focus_in()

    def focus_out(self) -> None:
        self._context().focus_out()

    def process_key_event(
        self, keyval: int, keycode: int, state: int, is_release: bool, time: int
    ) -> bool:
        return self._context().process_key_event(keyval, keycode, state, is_release, time)

    def reset(self) -> None:
        self._context().reset()

    def set_capability(self, caps: int) -> None:
        self._context().set_capability(caps)

    def set_cursor_rect(self, x: int, y: int, w: int, h: int) -> None:
        self._context().set_cursor_rect(x, y, w, h)

    def set_cursor_rect_v2(self, x: int, y: int, w: int, h: int, scale: float) -> None:
        self._context().set_cursor_rect_v2(x, y, w, h, scale)

    def set_surrounding_text(self, text: str, cursor: int, anchor: int) -> None:
        self._context().set_surrounding_text(text, cursor, anchor)

    def set_surrounding_text_position(self, cursor: int, anchor: int) -> None:
        self._context().set_surrounding_text_position(cursor, anchor)

    def prev_page(self) -> None:
        self._context().prev_page()

    def next_page(self) -> None:
        self._context().next_page()

    def select_candidate(self, index: int) -> None:
        self._context().select_candidate(index)