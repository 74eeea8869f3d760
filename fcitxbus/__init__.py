"""D-Bus structures, proxies, an in-process bus and input context handling for Fcitx 5."""

__version__ = "0.1.0"
__all__ = ["flags", "types", "proxies", "watcher", "inputcontext"]