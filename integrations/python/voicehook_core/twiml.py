"""TwiML response builder.

Verbs are plain dataclasses with chaining helpers::

    response = (
        Response()
        .dial(Dial().number(Number("810-730-3842")))
        .say(Say("Failed to connect"))
    )
    body = response.render()

Attributes left at their defaults are not written. ``finish_on_key``,
``start_conference_on_enter`` and ``wait_url`` are written whenever they are
not ``None``, so an explicit ``""`` or ``False`` reaches the provider.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from enum import Enum, Flag, auto
from typing import Any, BinaryIO, Iterable, List, Optional, Tuple

XML_HEADER = '<?xml version="1.0" encoding="UTF-8"?>\n'

Attribute = Optional[Tuple[str, Any]]


class Method(str, Enum):
    POST = "POST"
    GET = "GET"


class Voice(str, Enum):
    MAN = "man"
    WOMAN = "woman"
    ALICE = "alice"
    POLLY_MATTHEW = "Polly.Matthew"

    def say(self, message: str) -> "Say":
        return Say(message, voice=self)


class Beep(str, Enum):
    ON = "true"
    OFF = "false"
    ON_ENTER = "onEnter"
    ON_EXIT = "onExit"


class ConferenceEvent(Flag):
    START = auto()
    END = auto()
    JOIN = auto()
    LEAVE = auto()
    MUTE = auto()
    HOLD = auto()
    SPEAKER = auto()

    def tokens(self) -> str:
        """Space-joined event names in declaration order."""

        return " ".join(
            member.name.lower() for member in ConferenceEvent if member in self
        )


def _attr(name: str, value: Any) -> Attribute:
    if value is None or value == "" or value is False or value == 0:
        return None
    return name, value


def _explicit(name: str, value: Any) -> Attribute:
    if value is None:
        return None
    return name, value


def _format(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, ConferenceEvent):
        return value.tokens()
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def _element(tag: str, attributes: Iterable[Attribute], text: Optional[str] = None) -> ET.Element:
    element = ET.Element(tag)
    for attribute in attributes:
        if attribute is not None:
            element.set(attribute[0], _format(attribute[1]))
    if text:
        element.text = text
    return element


class Verb:
    def to_element(self) -> ET.Element:
        raise NotImplementedError


def _append_children(element: ET.Element, verbs: Iterable[Verb]) -> ET.Element:
    for verb in verbs:
        element.append(verb.to_element())
    return element


@dataclass
class Say(Verb):
    message: str
    voice: Optional[Voice] = None
    loop: int = 0

    def set_voice(self, voice: Voice) -> "Say":
        self.voice = voice
        return self

    def to_element(self) -> ET.Element:
        return _element("Say", [_attr("voice", self.voice), _attr("loop", self.loop)], self.message)


@dataclass
class Pause(Verb):
    length: int = 0

    def to_element(self) -> ET.Element:
        return _element("Pause", [_attr("length", self.length)])


@dataclass
class Number(Verb):
    number: str

    def to_element(self) -> ET.Element:
        return _element("Number", [], self.number)


@dataclass
class Redirect(Verb):
    url: str
    method: Optional[Method] = None

    def set_method(self, method: Method) -> "Redirect":
        self.method = method
        return self

    def to_element(self) -> ET.Element:
        return _element("Redirect", [_attr("method", self.method)], self.url)


@dataclass
class Conference(Verb):
    name: str
    muted: bool = False
    beep: Optional[Beep] = None
    start_conference_on_enter: Optional[bool] = None
    end_conference_on_exit: bool = False
    wait_url: Optional[str] = None
    wait_method: Optional[Method] = None
    max_participants: int = 0
    record: str = ""
    region: str = ""
    trim: str = ""
    coach: str = ""
    status_callback_event: Optional[ConferenceEvent] = None
    status_callback: str = ""
    status_callback_method: Optional[Method] = None
    recording_status_callback: str = ""
    recording_status_callback_method: Optional[Method] = None
    recording_status_callback_event: str = ""
    event_callback_url: str = ""

    def set(self, **attributes: Any) -> "Conference":
        """Set any of the conference attributes by their field name."""

        for name, value in attributes.items():
            if name == "name" or name not in self.__dataclass_fields__:
                raise AttributeError(f"Conference has no attribute {name!r}")
            setattr(self, name, value)
        return self

    def to_element(self) -> ET.Element:
        events = self.status_callback_event
        return _element(
            "Conference",
            [
                _attr("muted", self.muted),
                _attr("beep", self.beep),
                _explicit("startConferenceOnEnter", self.start_conference_on_enter),
                _attr("endConferenceOnExit", self.end_conference_on_exit),
                _explicit("waitUrl", self.wait_url),
                _attr("waitMethod", self.wait_method),
                _attr("maxParticipants", self.max_participants),
                _attr("record", self.record),
                _attr("region", self.region),
                _attr("trim", self.trim),
                _attr("coach", self.coach),
                _attr("statusCallbackEvent", events.tokens() if events else None),
                _attr("statusCallback", self.status_callback),
                _attr("statusCallbackMethod", self.status_callback_method),
                _attr("recordingStatusCallback", self.recording_status_callback),
                _attr("recordingStatusCallbackMethod", self.recording_status_callback_method),
                _attr("recordingStatusCallbackEvent", self.recording_status_callback_event),
                _attr("eventCallbackUrl", self.event_callback_url),
            ],
            self.name,
        )


@dataclass
class Dial(Verb):
    action: str = ""
    method: Optional[Method] = None
    timeout: int = 0
    verbs: List[Verb] = field(default_factory=list)

    def number(self, number: Number) -> "Dial":
        self.verbs.append(number)
        return self

    def conference(self, conference: Conference) -> "Dial":
        self.verbs.append(conference)
        return self

    def to_element(self) -> ET.Element:
        element = _element(
            "Dial",
            [_attr("action", self.action), _attr("method", self.method), _attr("timeout", self.timeout)],
        )
        return _append_children(element, self.verbs)


@dataclass
class Gather(Verb):
    input: str = ""
    action: str = ""
    method: Optional[Method] = None
    timeout: int = 0
    finish_on_key: Optional[str] = None
    num_digits: int = 0
    partial_result_callback: str = ""
    partial_result_callback_method: Optional[Method] = None
    language: str = ""
    hints: str = ""
    profanity_filter: bool = False
    speech_timeout: int = 0
    verbs: List[Verb] = field(default_factory=list)

    def say(self, say: Say) -> "Gather":
        self.verbs.append(say)
        return self

    def pause(self, length: int) -> "Gather":
        self.verbs.append(Pause(length))
        return self

    def set_input(self, input: str) -> "Gather":
        self.input = input
        return self

    def set_action(self, action: str) -> "Gather":
        self.action = action
        return self

    def set_method(self, method: Method) -> "Gather":
        self.method = method
        return self

    def set_timeout(self, timeout: int) -> "Gather":
        self.timeout = timeout
        return self

    def to_element(self) -> ET.Element:
        element = _element(
            "Gather",
            [
                _attr("input", self.input),
                _attr("action", self.action),
                _attr("method", self.method),
                _attr("timeout", self.timeout),
                _explicit("finishOnKey", self.finish_on_key),
                _attr("numDigits", self.num_digits),
                _attr("partialResultCallback", self.partial_result_callback),
                _attr("partialResultCallbackMethod", self.partial_result_callback_method),
                _attr("language", self.language),
                _attr("hints", self.hints),
                _attr("profanityFilter", self.profanity_filter),
                _attr("speechTimeout", self.speech_timeout),
            ],
        )
        return _append_children(element, self.verbs)


@dataclass
class Response:
    """The root ``<Response>`` document."""

    verbs: List[Verb] = field(default_factory=list)

    def gather(self, gather: Gather) -> "Response":
        self.verbs.append(gather)
        return self

    def dial(self, dial: Dial) -> "Response":
        self.verbs.append(dial)
        return self

    def say(self, say: Say) -> "Response":
        self.verbs.append(say)
        return self

    def pause(self, length: int) -> "Response":
        self.verbs.append(Pause(length))
        return self

    def redirect(self, redirect: Redirect) -> "Response":
        self.verbs.append(redirect)
        return self

    def to_element(self) -> ET.Element:
        return _append_children(ET.Element("Response"), self.verbs)

    def render(self) -> bytes:
        root = self.to_element()
        ET.indent(root, space="  ")
        document = ET.tostring(root, encoding="unicode", short_empty_elements=False)
        return (XML_HEADER + document).encode("utf-8")

    def render_to(self, stream: BinaryIO) -> None:
        stream.write(self.render())
