"""Pipeline splitting and per-stage redirection parsing."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .exceptions import ParseError, ParseErrorKind
from .expand import DEFAULT_EXPANSION_LIMIT, NO_VARIABLES, EnvLookup, expand
from .text import normalize, split_blanks


class RedirectKind(Enum):
    INPUT = "<"
    OUTPUT = ">"
    ERROR = "2>"


@dataclass(frozen=True)
class Marker:
    kind: RedirectKind
    start: int
    end: int


@dataclass
class StageSpec:
    argv: list[str] = field(default_factory=list)
    input_target: str | None = None
    output_target: str | None = None
    error_target: str | None = None

    @property
    def program(self) -> str:
        return self.argv[0]


@dataclass
class PipelineSpec:
    stages: list[StageSpec]
    detached: bool = False


def scan_markers(text: str) -> list[Marker]:
    """Classify every ``<``, ``>`` and ``2>`` in one forward pass.

    A ``>`` directly after the digit ``2`` is an error redirection whose span
    covers the digit; there is no quoting, so the digit is never an argument.
    """

    markers: list[Marker] = []
    for idx, char in enumerate(text):
        if char == "<":
            markers.append(Marker(RedirectKind.INPUT, idx, idx + 1))
        elif char == ">":
            if idx > 0 and text[idx - 1] == "2":
                markers.append(Marker(RedirectKind.ERROR, idx - 1, idx + 1))
            else:
                markers.append(Marker(RedirectKind.OUTPUT, idx, idx + 1))
    return markers


def parse_stage(
    stage_text: str,
    env_lookup: EnvLookup = NO_VARIABLES,
    *,
    limit: int = DEFAULT_EXPANSION_LIMIT,
) -> StageSpec:
    """Turn one pipeline stage into an argv plus redirection targets."""

    markers = scan_markers(stage_text)
    spec = StageSpec()
    command_parts: list[str] = []
    cursor = 0
    for position, marker in enumerate(markers):
        command_parts.append(stage_text[cursor : marker.start])
        stop = markers[position + 1].start if position + 1 < len(markers) else len(stage_text)
        target = expand(normalize(stage_text[marker.end : stop]), env_lookup, limit=limit)
        if not target:
            raise ParseError(ParseErrorKind.MISSING_TARGET, f"after {marker.kind.value}")
        if marker.kind is RedirectKind.INPUT:
            spec.input_target = target
        elif marker.kind is RedirectKind.OUTPUT:
            spec.output_target = target
        else:
            spec.error_target = target
        cursor = stop
    command_parts.append(stage_text[cursor:])
    command = expand("".join(command_parts), env_lookup, limit=limit)
    spec.argv = split_blanks(command)
    if not spec.argv:
        raise ParseError(ParseErrorKind.EMPTY_COMMAND, normalize(stage_text) or "<blank>")
    return spec


def split_pipeline(line: str) -> tuple[bool, list[str]]:
    """Return ``(detached, stage_texts)``; an empty line yields no stages."""

    text = normalize(line)
    if not text:
        return False, []
    detached = text.endswith("&")
    if detached:
        text = normalize(text[:-1])
    return detached, [normalize(piece) for piece in text.split("|")]


def parse_pipeline(
    line: str,
    env_lookup: EnvLookup = NO_VARIABLES,
    *,
    limit: int = DEFAULT_EXPANSION_LIMIT,
) -> PipelineSpec | None:
    detached, stage_texts = split_pipeline(line)
    if not stage_texts:
        return None
    stages = [parse_stage(text, env_lookup, limit=limit) for text in stage_texts]
    return PipelineSpec(stages=stages, detached=detached)


__all__ = [
    "Marker",
    "PipelineSpec",
    "RedirectKind",
    "StageSpec",
    "parse_pipeline",
    "parse_stage",
    "scan_markers",
    "split_pipeline",
]
