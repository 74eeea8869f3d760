"""Bit flags and enumerations shared with the input method server."""

from enum import Enum, IntFlag


class CapabilityFlag(IntFlag):
    """Capabilities an input context advertises to the server."""

    NONE = 0
    PREEDIT = 1 << 1
    PASSWORD = 1 << 3
    FORMATTED_PREEDIT = 1 << 4
    CLIENT_UNFOCUS_COMMIT = 1 << 5
    SURROUNDING_TEXT = 1 << 6
    EMAIL = 1 << 7
    DIGIT = 1 << 8
    UPPERCASE = 1 << 9
    LOWERCASE = 1 << 10
    NO_AUTO_UPPER_CASE = 1 << 11
    URL = 1 << 12
    DIALABLE = 1 << 13
    NUMBER = 1 << 14
    NO_SPELL_CHECK = 1 << 17
    ALPHA = 1 << 21
    GET_IM_INFO_ON_FOCUS = 1 << 23
    RELATIVE_RECT = 1 << 24
    MULTILINE = 1 << 35
    SENSITIVE = 1 << 36
    KEY_EVENT_ORDER_FIX = 1 << 37
    REPORT_KEY_REPEAT = 1 << 38
    CLIENT_SIDE_INPUT_PANEL = 1 << 39


class TextFormatFlag(IntFlag):
    """Formatting applied to a segment of preedit text."""

    NONE = 0
    UNDERLINE = 1 << 3
    HIGHLIGHT = 1 << 4
    DONT_COMMIT = 1 << 5
    BOLD = 1 << 6
    STRIKE = 1 << 7
    ITALIC = 1 << 8


class KeyState(IntFlag):
    """Modifier states carried with key events."""

    NO_STATE = 0
    SHIFT = 1 << 0
    CTRL = 1 << 2
    ALT = 1 << 3


class CandidateLayoutHint(Enum):
    """How a candidate list prefers to be laid out."""

    NOT_SET = 0
    VERTICAL = 1
    HORIZONTAL = 2