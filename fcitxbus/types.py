"""Structures exchanged with the input method server over D-Bus.

Each structure converts to and from the plain tuple form in which D-Bus
libraries represent a struct, with fields in wire order.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, ClassVar


def _fields(value: Any, count: int, kind: str) -> tuple:
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise TypeError(f"{kind} expects a struct sequence, got {type(value).__name__}")
    if len(value) != count:
        raise ValueError(f"{kind} expects {count} fields, got {len(value)}")
    return tuple(value)


def _str(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f"expected a string, got {type(value).__name__}")
    return value


def _int(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"expected an integer, got {type(value).__name__}")
    return int(value)


def _bool(value: Any) -> bool:
    if not isinstance(value, int):
        raise TypeError(f"expected a boolean, got {type(value).__name__}")
    return bool(value)


def _strings(value: Any) -> list[str]:
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise TypeError(f"expected a string list, got {type(value).__name__}")
    return [_str(item) for item in value]


def _structs(value: Any, cls: type) -> list:
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise TypeError(f"expected a list of structs, got {type(value).__name__}")
    return [cls.from_dbus(item) for item in value]


@dataclass
class FormattedPreedit:
    """A piece of preedit text with its format flags."""

    signature: ClassVar[str] = "(si)"

    string: str = ""
    format: int = 0

    def to_dbus(self) -> tuple:
        return (self.string, int(self.format))

    @classmethod
    def from_dbus(cls, value: Any) -> FormattedPreedit:
        string, fmt = _fields(value, 2, cls.__name__)
        return cls(_str(string), _int(fmt))


@dataclass
class StringKeyValue:
    """A string key paired with a string value."""

    signature: ClassVar[str] = "(ss)"

    key: str = ""
    value: str = ""

    def to_dbus(self) -> tuple:
        return (self.key, self.value)

    @classmethod
    def from_dbus(cls, value: Any) -> StringKeyValue:
        key, val = _fields(value, 2, cls.__name__)
        return cls(_str(key), _str(val))


@dataclass
class InputMethodEntry:
    """Description of one available input method."""

    signature: ClassVar[str] = "(ssssssb)"

    unique_name: str = ""
    name: str = ""
    native_name: str = ""
    icon: str = ""
    label: str = ""
    language_code: str = ""
    configurable: bool = False

    def to_dbus(self) -> tuple:
        return (
            self.unique_name,
            self.name,
            self.native_name,
            self.icon,
            self.label,
            self.language_code,
            bool(self.configurable),
        )

    @classmethod
    def from_dbus(cls, value: Any) -> InputMethodEntry:
        *texts, configurable = _fields(value, 7, cls.__name__)
        return cls(*(_str(t) for t in texts), configurable=_bool(configurable))


@dataclass
class VariantInfo:
    """A keyboard layout variant."""

    signature: ClassVar[str] = "(ssas)"

    variant: str = ""
    description: str = ""
    languages: list[str] = field(default_factory=list)

    def to_dbus(self) -> tuple:
        return (self.variant, self.description, list(self.languages))

    @classmethod
    def from_dbus(cls, value: Any) -> VariantInfo:
        variant, description, languages = _fields(value, 3, cls.__name__)
        return cls(_str(variant), _str(description), _strings(languages))


@dataclass
class LayoutInfo:
    """A keyboard layout together with its variants."""

    signature: ClassVar[str] = "(ssasa(ssas))"

    layout: str = ""
    description: str = ""
    languages: list[str] = field(default_factory=list)
    variants: list[VariantInfo] = field(default_factory=list)

    def to_dbus(self) -> tuple:
        return (
            self.layout,
            self.description,
            list(self.languages),
            [variant.to_dbus() for variant in self.variants],
        )

    @classmethod
    def from_dbus(cls, value: Any) -> LayoutInfo:
        layout, description, languages, variants = _fields(value, 4, cls.__name__)
        return cls(
            _str(layout),
            _str(description),
            _strings(languages),
            _structs(variants, VariantInfo),
        )


@dataclass
class ConfigOption:
    """One option of a configuration type."""

    signature: ClassVar[str] = "(sssva{sv})"

    name: str = ""
    type: str = ""
    description: str = ""
    default_value: Any = None
    properties: dict[str, Any] = field(default_factory=dict)

    def to_dbus(self) -> tuple:
        return (
            self.name,
            self.type,
            self.description,
            self.default_value,
            dict(self.properties),
        )

    @classmethod
    def from_dbus(cls, value: Any) -> ConfigOption:
        name, type_, description, default, properties = _fields(value, 5, cls.__name__)
        if not isinstance(properties, Mapping):
            raise TypeError(f"expected a property map, got {type(properties).__name__}")
        return cls(
            _str(name),
            _str(type_),
            _str(description),
            default,
            {_str(k): v for k, v in properties.items()},
        )


@dataclass
class ConfigType:
    """A named configuration type and its options."""

    signature: ClassVar[str] = "(sa(sssva{sv}))"

    name: str = ""
    options: list[ConfigOption] = field(default_factory=list)

    def to_dbus(self) -> tuple:
        return (self.name, [option.to_dbus() for option in self.options])

    @classmethod
    def from_dbus(cls, value: Any) -> ConfigType:
        name, options = _fields(value, 2, cls.__name__)
        return cls(_str(name), _structs(options, ConfigOption))


@dataclass
class AddonInfo:
    """Summary of an addon."""

    signature: ClassVar[str] = "(sssibb)"

    unique_name: str = ""
    name: str = ""
    comment: str = ""
    category: int = 0
    configurable: bool = False
    enabled: bool = False

    def to_dbus(self) -> tuple:
        return (
            self.unique_name,
            self.name,
            self.comment,
            int(self.category),
            bool(self.configurable),
            bool(self.enabled),
        )

    @classmethod
    def from_dbus(cls, value: Any) -> AddonInfo:
        unique_name, name, comment, category, configurable, enabled = _fields(
            value, 6, cls.__name__
        )
        return cls(
            _str(unique_name),
            _str(name),
            _str(comment),
            _int(category),
            _bool(configurable),
            _bool(enabled),
        )


@dataclass
class AddonInfoV2:
    """Addon summary including on-demand loading and dependencies."""

    signature: ClassVar[str] = "(sssibbbasas)"

    unique_name: str = ""
    name: str = ""
    comment: str = ""
    category: int = 0
    configurable: bool = False
    enabled: bool = False
    on_demand: bool = False
    dependencies: list[str] = field(default_factory=list)
    optional_dependencies: list[str] = field(default_factory=list)

    def to_dbus(self) -> tuple:
        return (
            self.unique_name,
            self.name,
            self.comment,
            int(self.category),
            bool(self.configurable),
            bool(self.enabled),
            bool(self.on_demand),
            list(self.dependencies),
            list(self.optional_dependencies),
        )

    @classmethod
    def from_dbus(cls, value: Any) -> AddonInfoV2:
        (
            unique_name,
            name,
            comment,
            category,
            configurable,
            enabled,
            on_demand,
            dependencies,
            optional_dependencies,
        ) = _fields(value, 9, cls.__name__)
        return cls(
            _str(unique_name),
            _str(name),
            _str(comment),
            _int(category),
            _bool(configurable),
            _bool(enabled),
            _bool(on_demand),
            _strings(dependencies),
            _strings(optional_dependencies),
        )


@dataclass
class AddonState:
    """Enabled state to apply to an addon."""

    signature: ClassVar[str] = "(sb)"

    unique_name: str = ""
    enabled: bool = False

    def to_dbus(self) -> tuple:
        return (self.unique_name, bool(self.enabled))

    @classmethod
    def from_dbus(cls, value: Any) -> AddonState:
        unique_name, enabled = _fields(value, 2, cls.__name__)
        return cls(_str(unique_name), _bool(enabled))