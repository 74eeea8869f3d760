# fcitxbus

Client-side building blocks for the Fcitx 5 input method framework's D-Bus
interfaces: the structures exchanged on the bus, proxies for the controller,
input method and input context interfaces, a watcher that tracks whether the
server is present, and an input context that is recreated whenever the server
comes back.

Everything runs over `fcitxbus.proxies.BusConnection`, a small in-process
message bus. Peers own names, export objects and emit signals on it, and the
proxies call methods and receive signals through it.

## Modules

- `fcitxbus.flags`: the enums shared with the server. `CapabilityFlag`,
  `TextFormatFlag` and `KeyState` are `IntFlag`s. `CandidateLayoutHint` is an
  `Enum` with the members `NOT_SET`, `VERTICAL` and `HORIZONTAL`.
- `fcitxbus.types`: dataclasses for the wire structures. These are
  `FormattedPreedit`, `StringKeyValue`, `InputMethodEntry`, `VariantInfo`,
  `LayoutInfo`, `ConfigOption`, `ConfigType`, `AddonInfo`, `AddonInfoV2` and
  `AddonState`.
  - `to_dbus()` returns the struct as a tuple in wire order. Nested structs
    become tuples inside lists.
  - The class method `from_dbus(value)` builds the object from such a
    sequence. It raises `TypeError` when a field has the wrong type and
    `ValueError` when the number of fields is wrong.
  - Each class also carries its D-Bus `signature`.
- `fcitxbus.proxies`:
  - `Signal`: a list of handlers with `connect`, `disconnect` and `emit`.
  - `BusConnection`: the in-process bus.
    - Peers: `new_peer`, `disconnect_peer`.
    - Names: `request_name`, `release_name`, `service_owner`,
      `is_service_registered`.
    - Objects: `export`, `unexport`.
    - Calls: `call`.
    - Signals: `add_signal_receiver`, `remove_signal_receiver`,
      `emit_signal`, and the `name_owner_changed` signal.
    - Failures raise `BusError`, which has the D-Bus error `name` and a
      `message`.
  - `DBusProxy`: the base for remote objects, with `call`, `is_valid`,
    `dispatch_signal` and `close`.
  - `ControllerProxy` (`org.fcitx.Fcitx.Controller1`): covers every
    controller method, for example `current_input_method`,
    `available_input_methods`, `get_config`, `set_addons_state` and `toggle`.
    Replies are decoded into the types above.
  - `InputMethodProxy` (`org.fcitx.Fcitx.InputMethod1`):
    `create_input_context(args)` returns the object path and UUID of the
    new context.
  - `InputContextInterface` (`org.fcitx.Fcitx.InputContext1`): the input
    context methods, with signals such as `commit_string`, `forward_key`,
    `update_formatted_preedit` and `update_client_side_ui`.
- `fcitxbus.watcher`: `Watcher(connection, watch_portal=False)`.
  - It follows `org.fcitx.Fcitx5` and, if asked, `org.freedesktop.portal.Fcitx`.
  - `availability()` says whether the server is present.
  - `service_name()` returns the name to reach the server by, preferring the
    main service.
  - `availability_changed` fires when presence changes while `watch()` is in
    effect.
- `fcitxbus.inputcontext`:
  `InputContextProxy(watcher, *, display="", program=None, scheduler=None)`.
  - When the server becomes available, it creates an input context at
    `/org/freedesktop/portal/inputmethod`. It sends `program` and, if set,
    `display`.
  - It drops the context when the server's connection goes away.
  - It re-emits the context's signals and emits `input_context_created` with
    the UUID.
  - `scheduler(delay, callback)` decides when the availability recheck runs.
    By default the recheck runs at once.
  - Input methods such as `focus_in` or `process_key_event` raise
    `RuntimeError` while no context exists.
  - `close()` (also used on leaving a `with` block) destroys the context.

## Example

```python
from fcitxbus.proxies import BusConnection, ControllerProxy
from fcitxbus.types import StringKeyValue
from fcitxbus.watcher import Watcher

entry = StringKeyValue(key="program", value="editor")
assert StringKeyValue.from_dbus(entry.to_dbus()) == entry

bus = BusConnection()
server = bus.new_peer()
bus.request_name("org.fcitx.Fcitx5", server)


class Controller:
    def CurrentInputMethod(self):
        return "keyboard-us"


bus.export(server, "/controller", "org.fcitx.Fcitx.Controller1", Controller())

proxy = ControllerProxy("org.fcitx.Fcitx5", "/controller", bus)
assert proxy.current_input_method() == "keyboard-us"

watcher = Watcher(bus)
watcher.watch()
assert watcher.availability()
assert watcher.service_name() == "org.fcitx.Fcitx5"
```

## What it does not do

The package has no connection to a session or system D-Bus. `BusConnection`
routes messages only between objects in the same process. To reach a running
server, subclass `BusConnection` and override `call`, `service_owner` and
`is_service_registered`. Your subclass must also emit `name_owner_changed`
and pass incoming signals to `emit_signal` (or directly to the receivers).

The package has no command-line program and no candidate window or other user
interface.

## Installing and testing

```
pip install .
pip install .[test]
pytest
```