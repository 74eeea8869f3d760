import pytest

from fcitxbus.flags import TextFormatFlag
from fcitxbus.types import (
    AddonInfo,
    AddonInfoV2,
    AddonState,
    ConfigOption,
    ConfigType,
    FormattedPreedit,
    InputMethodEntry,
    LayoutInfo,
    StringKeyValue,
    VariantInfo,
)


def test_round_trip_formatted_preedit():
    item = FormattedPreedit("nihao", int(TextFormatFlag.UNDERLINE | TextFormatFlag.HIGHLIGHT))
    assert FormattedPreedit.from_dbus(item.to_dbus()) == item
    assert FormattedPreedit.from_dbus(list(item.to_dbus())) == item


def test_round_trip_string_key_value():
    item = StringKeyValue("program", "editor")
    assert StringKeyValue.from_dbus(item.to_dbus()) == item
    assert StringKeyValue.from_dbus(list(item.to_dbus())) == item


def test_round_trip_input_method_entry():
    item = InputMethodEntry("pinyin", "Pinyin", "拼音", "fcitx-pinyin", "拼", "zh_CN", True)
    assert InputMethodEntry.from_dbus(item.to_dbus()) == item
    assert InputMethodEntry.from_dbus(list(item.to_dbus())) == item


def test_round_trip_variant_info():
    item = VariantInfo("dvorak", "Dvorak", ["en"])
    assert VariantInfo.from_dbus(item.to_dbus()) == item
    assert VariantInfo.from_dbus(list(item.to_dbus())) == item


def test_round_trip_layout_info():
    item = LayoutInfo(
        "us",
        "English (US)",
        ["en"],
        [VariantInfo("dvorak", "Dvorak", ["en"]), VariantInfo("intl", "Intl", [])],
    )
    assert LayoutInfo.from_dbus(item.to_dbus()) == item
    assert LayoutInfo.from_dbus(list(item.to_dbus())) == item


def test_round_trip_config_option():
    item = ConfigOption("Enabled", "Boolean", "Enable it", True, {"Tooltip": "tip"})
    assert ConfigOption.from_dbus(item.to_dbus()) == item
    assert ConfigOption.from_dbus(list(item.to_dbus())) == item


def test_round_trip_config_type():
    option = ConfigOption("Enabled", "Boolean", "Enable it", True, {"Tooltip": "tip"})
    item = ConfigType("Config", [option])
    assert ConfigType.from_dbus(item.to_dbus()) == item
    assert ConfigType.from_dbus(list(item.to_dbus())) == item


def test_round_trip_addon_info():
    item = AddonInfo("clipboard", "Clipboard", "History", 4, True, False)
    assert AddonInfo.from_dbus(item.to_dbus()) == item
    assert AddonInfo.from_dbus(list(item.to_dbus())) == item


def test_round_trip_addon_info_v2():
    item = AddonInfoV2("pinyin", "Pinyin", "IM", 0, True, True, False, ["core"], ["cloud"])
    assert AddonInfoV2.from_dbus(item.to_dbus()) == item
    assert AddonInfoV2.from_dbus(list(item.to_dbus())) == item


def test_round_trip_addon_state():
    item = AddonState("clipboard", True)
    assert AddonState.from_dbus(item.to_dbus()) == item
    assert AddonState.from_dbus(list(item.to_dbus())) == item


def test_formatted_preedit_wire_order():
    preedit = FormattedPreedit("abc", int(TextFormatFlag.BOLD))
    assert preedit.to_dbus() == ("abc", int(TextFormatFlag.BOLD))


def test_formatted_preedit_equality():
    assert FormattedPreedit("a", 1) == FormattedPreedit("a", 1)
    assert not FormattedPreedit("a", 1) == FormattedPreedit("a", 2)
    assert not FormattedPreedit("a", 1) == FormattedPreedit("b", 1)


def test_string_key_value_order():
    assert StringKeyValue("display", "x11:").to_dbus() == ("display", "x11:")


def test_config_option_field_order():
    option = ConfigOption("Name", "String", "Desc", "dflt", {})
    assert option.to_dbus() == ("Name", "String", "Desc", "dflt", {})


def test_layout_nests_variants():
    layout = LayoutInfo("us", "US", [], [VariantInfo("intl", "Intl", ["en"])])
    assert layout.to_dbus()[3] == [("intl", "Intl", ["en"])]


def test_defaults_are_empty():
    entry = AddonInfoV2()
    assert entry.to_dbus() == ("", "", "", 0, False, False, False, [], [])


def test_defaults_do_not_share_lists():
    first, second = VariantInfo(), VariantInfo()
    first.languages.append("en")
    assert second.languages == []


def test_int_bool_accepted_for_bool():
    state = AddonState.from_dbus(("x", 1))
    assert state.enabled is True


def test_signatures():
    assert FormattedPreedit().signature == "(si)"
    assert StringKeyValue().signature == "(ss)"
    assert AddonState().signature == "(sb)"


def test_wrong_field_count():
    with pytest.raises(ValueError):
        StringKeyValue.from_dbus(("only",))
    with pytest.raises(ValueError):
        AddonInfo.from_dbus(("a", "b", "c", 1, True))


def test_not_a_struct():
    with pytest.raises(TypeError):
        FormattedPreedit.from_dbus("ab")
    with pytest.raises(TypeError):
        AddonState.from_dbus(5)


def test_wrong_field_types():
    with pytest.raises(TypeError):
        FormattedPreedit.from_dbus((1, 2))
    with pytest.raises(TypeError):
        FormattedPreedit.from_dbus(("a", True))
    with pytest.raises(TypeError):
        VariantInfo.from_dbus(("v", "d", "en"))
    with pytest.raises(TypeError):
        ConfigOption.from_dbus(("n", "t", "d", 0, []))


def test_nested_error_propagates():
    with pytest.raises(ValueError):
        LayoutInfo.from_dbus(("us", "US", [], [("intl",)]))