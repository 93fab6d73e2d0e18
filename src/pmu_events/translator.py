"""Translation of JSON event lists into perf event strings.

Each object of the event list is turned into three strings:

    name   lower-cased ``EventName``
    event  perf syntax, e.g. ``event=0xc0,umask=0x1,period=2000003``
    desc   ``BriefDescription`` plus errata and precision notes

and handed to a callback. Fields the translator does not know are ignored so
newer event files keep working.
"""

from __future__ import annotations

import errno
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, NamedTuple, NoReturn, Optional, Union

from .config import EventsConfig
from .exceptions import PmuEventsError, StructureError
from .logging_config import get_logger
from .source import json_default_name
from .tokenizer import (
    Token,
    TokenType,
    json_line,
    json_name,
    json_streq,
    json_text,
    parse_json,
)

logger = get_logger(__name__)

EventCallback = Callable[[Any, str, str, str], Optional[int]]

# JSON field -> perf term.
FIELD_MAP = {
    "EventCode": "event=",
    "UMask": "umask=",
    "CounterMask": "cmask=",
    "Invert": "inv=",
    "AnyThread": "any=",
    "EdgeDetect": "edge=",
    "SampleAfterValue": "period=",
}

PRECISE_MARKER = "(Precise Event)"


@dataclass(frozen=True)
class MsrEntry:
    num: str
    pname: str


MSR_MAP = (
    MsrEntry("0x3F6", "ldlat="),
    MsrEntry("0x1A6", "offcore_rsp="),
    MsrEntry("0x1A7", "offcore_rsp="),
)


class Event(NamedTuple):
    name: str
    event: str
    desc: str


class FieldBuffer:
    """Append-only text; the separator is only used once there is text."""

    __slots__ = ("text",)

    def __init__(self) -> None:
        self.text = ""

    def add(self, sep: str, label: str, value: str = "") -> None:
        if self.text:
            self.text += sep
        self.text += label + value

    def __contains__(self, s: str) -> bool:
        return s in self.text

    def __bool__(self) -> bool:
        return bool(self.text)

    def __str__(self) -> str:
        return self.text


@dataclass
class EventRecord:
    """Event being assembled from one JSON object.

    ``precise``, ``msr`` and ``msrval`` are only applied once the whole
    object has been read, since their meaning depends on other fields.
    """

    name: FieldBuffer = field(default_factory=FieldBuffer)
    event: FieldBuffer = field(default_factory=FieldBuffer)
    desc: FieldBuffer = field(default_factory=FieldBuffer)
    msr: Optional[MsrEntry] = None
    msrval: Optional[Token] = None
    precise: Optional[Token] = None

    @property
    def complete(self) -> bool:
        return bool(self.name) and bool(self.event)


def cut_comma(value: str) -> str:
    """Keep the first alternative of a multi-valued field."""
    return value.split(",", 1)[0]


_ZERO = re.compile(r"0+|0[xX]0+")


def is_zero(value: str) -> bool:
    """True for ``"0"`` and the other plain spellings of zero (``"00"``, ``"0x0"``)."""
    return _ZERO.fullmatch(value) is not None


def fixdesc(desc: str) -> str:
    # Trailing dots look ugly in perf list.
    desc = desc.rstrip()
    if desc.endswith("."):
        desc = desc[:-1]
    return desc


class EventTranslator:
    """Walks the tokens of one event file and emits its events.

    Attributes:
        filename: Used as the prefix of structural diagnostics
        warned: Whether the unknown-MSR warning was already issued
    """

    def __init__(self, filename: str = "<input>"):
        self.filename = filename
        self.warned = False

    def lookup_msr(self, text: str, val: Token) -> Optional[MsrEntry]:
        num = cut_comma(json_text(text, val))
        for entry in MSR_MAP:
            if entry.num == num:
                return entry
        if not self.warned:
            self.warned = True
            logger.warning("Unknown MSR in event file %s", json_text(text, val))
        return None

    def translate(
        self,
        text: str,
        tokens: list[Token],
        func: EventCallback,
        data: Any = None,
    ) -> int:
        """Call ``func(data, name, event, desc)`` for every complete event.

        Returns:
            0 once the whole list was processed, or the first non-zero value
            returned by ``func``

        Raises:
            StructureError: If the tokens do not describe a list of flat
                string-valued objects
        """
        if not tokens or tokens[0].type is not TokenType.ARRAY:
            self._fail(text, tokens, 0, "expected top level array")

        cursor = 1
        for _ in range(tokens[0].size):
            obj = self._expect(text, tokens, cursor, TokenType.OBJECT, "expected object")
            cursor += 1
            if obj.size % 2:
                self._fail(text, tokens, cursor - 1, "expected key/value pairs",
                           got=f"{obj.size} members")

            record = EventRecord()
            for j in range(cursor, cursor + obj.size, 2):
                key = self._expect(text, tokens, j, TokenType.STRING, "expected field name")
                val = self._expect(text, tokens, j + 1, TokenType.STRING, "expected string value")
                self._apply_field(text, record, json_text(text, key), val)
            self._finish(text, record)

            if record.complete:
                err = func(data, record.name.text, record.event.text, record.desc.text)
                if err:
                    return err
            elif logger.isEnabledFor(logging.DEBUG):
                logger.debug(
                    "%s:%d: skipping event without name or encoding",
                    self.filename, json_line(text, obj),
                )
            cursor += obj.size

        if cursor != len(tokens):
            self._fail(text, tokens, cursor, "unexpected objects at end")
        return 0

    def _apply_field(self, text: str, record: EventRecord, key: str, val: Token) -> None:
        value = json_text(text, val)
        nz = not is_zero(value)

        prefix = FIELD_MAP.get(key)
        if prefix is not None:
            if nz:
                record.event.add(",", prefix, cut_comma(value))
        elif key == "EventName":
            record.name.add("", "", value)
        elif key == "BriefDescription":
            record.desc.add("", "", value)
            record.desc.text = fixdesc(record.desc.text)
        elif key == "PEBS":
            if nz and PRECISE_MARKER not in record.desc:
                record.precise = val
        elif key == "MSRIndex":
            if nz:
                record.msr = self.lookup_msr(text, val)
        elif key == "MSRValue":
            record.msrval = val
        elif key == "Errata":
            if value != "null":
                record.desc.add(". ", "Spec update: ", value)
        elif key == "Data_LA":
            if nz:
                record.desc.add(". ", "Supports address when precise")

    def _finish(self, text: str, record: EventRecord) -> None:
        if record.precise is not None:
            if json_streq(text, record.precise, "2"):
                record.desc.add(" ", "(Must be precise)")
            else:
                record.desc.add(" ", "(Precise event)")
        if record.msr is not None:
            if record.msrval is None:
                logger.debug("%s without MSRValue, dropping %s", record.name, record.msr.pname)
            else:
                record.event.add(",", record.msr.pname, json_text(text, record.msrval))
        record.name.text = record.name.text.lower()

    def _expect(
        self, text: str, tokens: list[Token], index: int, kind: TokenType, message: str
    ) -> Token:
        if index >= len(tokens) or tokens[index].type is not kind:
            self._fail(text, tokens, index, message)
        return tokens[index]

    def _fail(
        self,
        text: str,
        tokens: list[Token],
        index: int,
        message: str,
        got: Optional[str] = None,
    ) -> NoReturn:
        if index >= len(tokens):
            line = text.count("\n") + 1
            got = got or "end of input"
        else:
            loc = tokens[index]
            # Offset 0 past the first token is reported at its predecessor.
            if loc.start == 0 and index > 0:
                loc = tokens[index - 1]
            line = json_line(text, loc)
            got = got or json_name(tokens[index])
        raise StructureError(self.filename, line, message, got)


def json_events(
    fn: Optional[Union[str, Path]],
    func: EventCallback,
    data: Any = None,
    config: Optional[EventsConfig] = None,
) -> int:
    """Read a JSON event file and call ``func`` for each event.

    Args:
        fn: File to read, or None for the default file of this CPU
        func: Called as ``func(data, name, event, desc)``; a non-zero
            return stops processing
        data: Passed through to ``func``
        config: Settings used to find the default file

    Returns:
        0 on success, the callback's non-zero return value, or ``-EIO`` if
        the settings are invalid or the file is missing, malformed, or not
        an event list
    """
    try:
        if fn is None:
            fn = json_default_name(config)
        text, tokens = parse_json(fn)
        return EventTranslator(str(fn)).translate(text, tokens, func, data)
    except PmuEventsError as e:
        logger.error("%s", e)
        return -errno.EIO


def read_events(
    fn: Optional[Union[str, Path]] = None, config: Optional[EventsConfig] = None
) -> list[Event]:
    """Translate a whole event file into a list.

    Raises:
        SourceError: If the file is missing, malformed, or not an event list
        ConfigurationError: If no file is given and the settings are invalid
    """
    if fn is None:
        fn = json_default_name(config)
    text, tokens = parse_json(fn)
    events: list[Event] = []

    def collect(_data: Any, name: str, event: str, desc: str) -> int:
        events.append(Event(name, event, desc))
        return 0

    EventTranslator(str(fn)).translate(text, tokens, collect)
    return events
