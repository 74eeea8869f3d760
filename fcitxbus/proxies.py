"""Client proxies for the input method server's D-Bus interfaces.

``BusConnection`` is a small in-process message bus: peers own names,
export objects and emit signals, and proxies call methods and receive
signals through it. A backend for a system bus can subclass it and
override ``call``, ``service_owner`` and ``is_service_registered``.
"""

from __future__ import annotations

import itertools
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Any, ClassVar

from .types import (
    AddonInfo,
    AddonInfoV2,
    AddonState,
    ConfigType,
    FormattedPreedit,
    InputMethodEntry,
    LayoutInfo,
    StringKeyValue,
)

ERROR_SERVICE_UNKNOWN = "org.freedesktop.DBus.Error.ServiceUnknown"
ERROR_UNKNOWN_OBJECT = "org.freedesktop.DBus.Error.UnknownObject"
ERROR_UNKNOWN_METHOD = "org.freedesktop.DBus.Error.UnknownMethod"
ERROR_NAME_TAKEN = "org.freedesktop.DBus.Error.NameTaken"
ERROR_INVALID_ARGS = "org.freedesktop.DBus.Error.InvalidArgs"


class BusError(Exception):
    """An error reply from the bus or from a remote object."""

    def __init__(self, name: str, message: str = "") -> None:
        super().__init__(f"{name}: {message}" if message else name)
        self.name = name
        self.message = message


class Signal:
    """A list of handlers called in connection order."""

    def __init__(self) -> None:
        self._handlers: list[Callable[..., Any]] = []

    def connect(self, handler: Callable[..., Any]) -> None:
        self._handlers.append(handler)

    def disconnect(self, handler: Callable[..., Any]) -> None:
        try:
            self._handlers.remove(handler)
        except ValueError:
            raise ValueError("handler is not connected") from None

    def emit(self, *args: Any) -> None:
        for handler in list(self._handlers):
            handler(*args)

    def __len__(self) -> int:
        return len(self._handlers)


@dataclass
class _Receiver:
    service: str
    path: str
    interface: str
    callback: Callable[[str, Sequence[Any]], Any]


class BusConnection:
    """An in-process bus routing method calls and signals between peers."""

    def __init__(self) -> None:
        self._ids = itertools.count(1)
        self._peers: set[str] = set()
        self._owners: dict[str, str] = {}
        self._objects: dict[tuple[str, str, str], Any] = {}
        self._receivers: list[_Receiver] = []
        self.name_owner_changed = Signal()

    def new_peer(self) -> str:
        """Create a peer and return its unique name."""
        peer = f":1.{next(self._ids)}"
        self._peers.add(peer)
        self.name_owner_changed.emit(peer, "", peer)
        return peer

    def disconnect_peer(self, peer: str) -> None:
        """Remove a peer, releasing its names and objects."""
        if peer not in self._peers:
            raise KeyError(peer)
        for name in [n for n, owner in self._owners.items() if owner == peer]:
            self.release_name(name)
        for key in [k for k in self._objects if k[0] == peer]:
            del self._objects[key]
        self._peers.discard(peer)
        self.name_owner_changed.emit(peer, peer, "")

    def request_name(self, name: str, peer: str) -> None:
        if peer not in self._peers:
            raise KeyError(peer)
        current = self._owners.get(name)
        if current == peer:
            return
        if current is not None:
            raise BusError(ERROR_NAME_TAKEN, f"{name} is owned by {current}")
        self._owners[name] = peer
        self.name_owner_changed.emit(name, "", peer)

    def release_name(self, name: str) -> None:
        owner = self._owners.pop(name, None)
        if owner is None:
            raise KeyError(name)
        self.name_owner_changed.emit(name, owner, "")

    def export(self, peer: str, path: str, interface: str, handler: Any) -> None:
        """Serve ``interface`` at ``path`` for ``peer`` with ``handler``'s methods."""
        if peer not in self._peers:
            raise KeyError(peer)
        self._objects[(peer, path, interface)] = handler

    def unexport(self, peer: str, path: str, interface: str) -> None:
        del self._objects[(peer, path, interface)]

    def service_owner(self, name: str) -> str | None:
        if name.startswith(":"):
            return name if name in self._peers else None
        return self._owners.get(name)

    def is_service_registered(self, name: str) -> bool:
        return self.service_owner(name) is not None

    def call(
        self,
        service: str,
        path: str,
        interface: str,
        method: str,
        args: Sequence[Any],
    ) -> Any:
        owner = self.service_owner(service)
        if owner is None:
            raise BusError(ERROR_SERVICE_UNKNOWN, f"{service} is not registered")
        handler = self._objects.get((owner, path, interface))
        if handler is None:
            raise BusError(ERROR_UNKNOWN_OBJECT, f"no {interface} at {path}")
        function = getattr(handler, method, None)
        if not callable(function):
            raise BusError(ERROR_UNKNOWN_METHOD, f"{interface}.{method}")
        return function(*args)

    def add_signal_receiver(
        self,
        service: str,
        path: str,
        interface: str,
        callback: Callable[[str, Sequence[Any]], Any],
    ) -> None:
        self._receivers.append(_Receiver(service, path, interface, callback))

    def remove_signal_receiver(
        self, callback: Callable[[str, Sequence[Any]], Any]
    ) -> None:
        self._receivers = [r for r in self._receivers if r.callback != callback]

    def emit_signal(
        self,
        sender: str,
        path: str,
        interface: str,
        name: str,
        args: Sequence[Any] = (),
    ) -> None:
        """Deliver a signal from ``sender`` to every matching receiver."""
        for receiver in list(self._receivers):
            if (
                receiver.path == path
                and receiver.interface == interface
                and self.service_owner(receiver.service) == sender
            ):
                receiver.callback(name, args)


def _no_args(args: tuple) -> tuple:
    if args:
        raise ValueError(f"expected no arguments, got {len(args)}")
    return ()


def _preedits(value: Any) -> list[FormattedPreedit]:
    return [FormattedPreedit.from_dbus(item) for item in value]


def _pair(reply: Any) -> tuple[Any, Any]:
    if not isinstance(reply, Sequence) or isinstance(reply, (str, bytes)):
        raise BusError(ERROR_INVALID_ARGS, "expected a two-value reply")
    if len(reply) != 2:
        raise BusError(ERROR_INVALID_ARGS, f"expected 2 values, got {len(reply)}")
    return reply[0], reply[1]


class DBusProxy:
    """A remote object reached through a ``BusConnection``."""

    interface: ClassVar[str] = ""

    def __init__(
        self,
        service: str,
        path: str,
        connection: BusConnection,
        interface: str | None = None,
    ) -> None:
        resolved = interface or type(self).interface
        if not resolved:
            raise ValueError("an interface name is required")
        self.interface = resolved
        self.service = service
        self.path = path
        self.connection = connection
        self._signals: dict[str, tuple[Signal, Callable[[tuple], tuple]]] = {}
        connection.add_signal_receiver(service, path, resolved, self.dispatch_signal)

    def _declare_signal(
        self, name: str, decode: Callable[[tuple], tuple] = tuple
    ) -> Signal:
        signal = Signal()
        self._signals[name] = (signal, decode)
        return signal

    def is_valid(self) -> bool:
        return self.connection.is_service_registered(self.service)

    def call(self, method: str, *args: Any) -> Any:
        return self.connection.call(
            self.service, self.path, self.interface, method, args
        )

    def dispatch_signal(self, name: str, args: Sequence[Any]) -> bool:
        """Emit the proxy signal for a wire signal; return whether one matched."""
        entry = self._signals.get(name)
        if entry is None:
            return False
        signal, decode = entry
        signal.emit(*decode(tuple(args)))
        return True

    def close(self) -> None:
        self.connection.remove_signal_receiver(self.dispatch_signal)


class ControllerProxy(DBusProxy):
    """Proxy for the server's controller interface."""

    interface: ClassVar[str] = "org.fcitx.Fcitx.Controller1"

    def __init__(
        self, service: str, path: str, connection: BusConnection
    ) -> None:
        super().__init__(service, path, connection)
        self.input_method_groups_changed = self._declare_signal(
            "InputMethodGroupsChanged", _no_args
        )

    def activate(self) -> None:
        self.call("Activate")

    def add_input_method_group(self, name: str) -> None:
        self.call("AddInputMethodGroup", str(name))

    def addon_for_im(self, name: str) -> str:
        return str(self.call("AddonForIM", str(name)))

    def available_input_methods(self) -> list[InputMethodEntry]:
        return [InputMethodEntry.from_dbus(v) for v in self.call("AvailableInputMethods")]

    def available_keyboard_layouts(self) -> list[LayoutInfo]:
        return [LayoutInfo.from_dbus(v) for v in self.call("AvailableKeyboardLayouts")]

    def check_update(self) -> bool:
        return bool(self.call("CheckUpdate"))

    def configure(self) -> None:
        self.call("Configure")

    def configure_addon(self, addon: str) -> None:
        self.call("ConfigureAddon", str(addon))

    def configure_im(self, im: str) -> None:
        self.call("ConfigureIM", str(im))

    def current_input_method(self) -> str:
        return str(self.call("CurrentInputMethod"))

    def current_ui(self) -> str:
        return str(self.call("CurrentUI"))

    def exit(self) -> None:
        self.call("Exit")

    def get_addons(self) -> list[AddonInfo]:
        return [AddonInfo.from_dbus(v) for v in self.call("GetAddons")]

    def get_addons_v2(self) -> list[AddonInfoV2]:
        return [AddonInfoV2.from_dbus(v) for v in self.call("GetAddonsV2")]

    def get_config(self, uri: str) -> tuple[Any, list[ConfigType]]:
        value, types = _pair(self.call("GetConfig", str(uri)))
        return value, [ConfigType.from_dbus(v) for v in types]

    def input_method_group_info(
        self, name: str
    ) -> tuple[str, list[StringKeyValue]]:
        layout, items = _pair(self.call("InputMethodGroupInfo", str(name)))
        return str(layout), [StringKeyValue.from_dbus(v) for v in items]

    def input_method_groups(self) -> list[str]:
        return [str(name) for name in self.call("InputMethodGroups")]

    def refresh(self) -> None:
        self.call("Refresh")

    def reload_addon_config(self, addon: str) -> None:
        self.call("ReloadAddonConfig", str(addon))

    def reload_config(self) -> None:
        self.call("ReloadConfig")

    def remove_input_method_group(self, name: str) -> None:
        self.call("RemoveInputMethodGroup", str(name))

    def reset_im_list(self) -> None:
        self.call("ResetIMList")

    def restart(self) -> None:
        self.call("Restart")

    def set_addons_state(self, states: Iterable[AddonState]) -> None:
        self.call("SetAddonsState", [state.to_dbus() for state in states])

    def set_config(self, uri: str, value: Any) -> None:
        self.call("SetConfig", str(uri), value)

    def set_current_im(self, name: str) -> None:
        self.call("SetCurrentIM", str(name))

    def set_input_method_group_info(
        self, name: str, layout: str, entries: Iterable[StringKeyValue]
    ) -> None:
        self.call(
            "SetInputMethodGroupInfo",
            str(name),
            str(layout),
            [entry.to_dbus() for entry in entries],
        )

    def state(self) -> int:
        return int(self.call("State"))

    def toggle(self) -> None:
        self.call("Toggle")


def _commit_string(args: tuple) -> tuple:
    (text,) = args
    return (str(text),)


def _current_im(args: tuple) -> tuple:
    name, unique_name, lang_code = args
    return (str(name), str(unique_name), str(lang_code))


def _delete_surrounding(args: tuple) -> tuple:
    offset, nchar = args
    return (int(offset), int(nchar))


def _forward_key(args: tuple) -> tuple:
    keyval, state, is_release = args
    return (int(keyval), int(state), bool(is_release))


def _formatted_preedit(args: tuple) -> tuple:
    preedit, cursor = args
    return (_preedits(preedit), int(cursor))


def _client_side_ui(args: tuple) -> tuple:
    (
        preedit,
        cursor,
        aux_up,
        aux_down,
        candidates,
        candidate_index,
        layout_hint,
        has_prev,
        has_next,
    ) = args
    return (
        _preedits(preedit),
        int(cursor),
        _preedits(aux_up),
        _preedits(aux_down),
        [StringKeyValue.from_dbus(item) for item in candidates],
        int(candidate_index),
        int(layout_hint),
        bool(has_prev),
        bool(has_next),
    )


class InputContextInterface(DBusProxy):
    """Proxy for one input context object on the server."""

    interface: ClassVar[str] = "org.fcitx.Fcitx.InputContext1"

    def __init__(
        self, service: str, path: str, connection: BusConnection
    ) -> None:
        super().__init__(service, path, connection)
        self.commit_string = self._declare_signal("CommitString", _commit_string)
        self.current_im = self._declare_signal("CurrentIM", _current_im)
        self.delete_surrounding_text = self._declare_signal(
            "DeleteSurroundingText", _delete_surrounding
        )
        self.forward_key = self._declare_signal("ForwardKey", _forward_key)
        self.update_client_side_ui = self._declare_signal(
            "UpdateClientSideUI", _client_side_ui
        )
        self.update_formatted_preedit = self._declare_signal(
            "UpdateFormattedPreedit", _formatted_preedit
        )

    def destroy_ic(self) -> None:
        self.call("DestroyIC")

    def focus_in(self) -> None:
        self.call("FocusIn")

    def focus_out(self) -> None:
        self.call("FocusOut")

    def next_page(self) -> None:
        self.call("NextPage")

    def prev_page(self) -> None:
        self.call("PrevPage")

    def process_key_event(
        self, keyval: int, keycode: int, state: int, is_release: bool, time: int
    ) -> bool:
        return bool(
            self.call(
                "ProcessKeyEvent",
                int(keyval),
                int(keycode),
                int(state),
                bool(is_release),
                int(time),
            )
        )

    def reset(self) -> None:
        self.call("Reset")

    def select_candidate(self, index: int) -> None:
        self.call("SelectCandidate", int(index))

    def set_capability(self, caps: int) -> None:
        self.call("SetCapability", int(caps))

    def set_cursor_rect(self, x: int, y: int, w: int, h: int) -> None:
        self.call("SetCursorRect", int(x), int(y), int(w), int(h))

    def set_cursor_rect_v2(
        self, x: int, y: int, w: int, h: int, scale: float
    ) -> None:
        self.call("SetCursorRectV2", int(x), int(y), int(w), int(h), float(scale))

    def set_surrounding_text(self, text: str, cursor: int, anchor: int) -> None:
        self.call("SetSurroundingText", str(text), int(cursor), int(anchor))

    def set_surrounding_text_position(self, cursor: int, anchor: int) -> None:
        self.call("SetSurroundingTextPosition", int(cursor), int(anchor))


class InputMethodProxy(DBusProxy):
    """Proxy for the server's input context factory."""

    interface: ClassVar[str] = "org.fcitx.Fcitx.InputMethod1"

    def create_input_context(
        self, args: Iterable[StringKeyValue]
    ) -> tuple[str, bytes]:
        """Create an input context; return its object path and UUID."""
        path, uuid = _pair(
            self.call("CreateInputContext", [arg.to_dbus() for arg in args])
        )
        return str(path), bytes(uuid)