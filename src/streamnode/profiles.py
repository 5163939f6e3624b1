"""
Transcode profiles - Resolve user tokens into encode targets for the live source.

Token grammar:
    <resolution>p<framerate>   e.g. "1080p60"
    <resolution>p              e.g. "720p" (framerate defaults to 30)

A resolution pass runs three stages:
- Parse: token -> candidate, or rejection (malformed-resolution/framerate)
- Validate: reject upscales and no-op targets, clamp framerate to the source
- Deduplicate: one profile per resolution, highest framerate wins

The pass is pure apart from log lines; callers re-run it when the source changes.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from .constants import DEFAULT_FRAMERATE, TOKEN_SEPARATOR

if TYPE_CHECKING:
    from .probe import SourceProbe

logger = logging.getLogger(__name__)

# Longer segments are malformed; int() refuses very long digit strings
MAX_DIGITS = 9


class RejectReason(Enum):
    MALFORMED_RESOLUTION = "malformed-resolution"
    MALFORMED_FRAMERATE = "malformed-framerate"
    NOT_SMALLER_THAN_SOURCE = "resolution-not-smaller-than-source"
    IDENTICAL_TO_SOURCE = "identical-to-source"


@dataclass(frozen=True)
class SourceCapabilities:
    """Resolution and framerate of the incoming, unmodified stream."""

    resolution: int
    framerate: int

    def __post_init__(self):
        if self.resolution <= 0 or self.framerate <= 0:
            raise ValueError(f"Source capabilities must be positive, got {self.resolution}p{self.framerate}")

    @classmethod
    def from_probe(cls, probe: SourceProbe) -> SourceCapabilities:
        """Sample a probe once for a single resolution pass."""
        return cls(resolution=probe.current_resolution(), framerate=probe.current_framerate())


@dataclass(frozen=True)
class TranscodeProfile:
    """A single encode target."""

    resolution: int
    framerate: int

    @property
    def label(self) -> str:
        return f"{self.resolution}{TOKEN_SEPARATOR}{self.framerate}"


@dataclass(frozen=True)
class Rejection:
    """A token that did not make it into the output, and why."""

    token: str
    reason: RejectReason
    detail: str = ""


@dataclass
class ResolutionResult:
    """Outcome of one resolution pass."""

    profiles: list[TranscodeProfile] = field(default_factory=list)
    rejections: list[Rejection] = field(default_factory=list)
    clamped: list[str] = field(default_factory=list)  # tokens whose framerate was lowered


def _parse_positive_int(value: str) -> int | None:
    # str.isdigit() accepts non-ASCII digits that int() may not
    if not value.isascii() or not value.isdigit() or len(value) > MAX_DIGITS:
        return None
    number = int(value)
    return number if number > 0 else None


def parse_token(token: str) -> TranscodeProfile | Rejection:
    """
    Parse a raw token into a candidate profile.

    Purely syntactic - no checks against the source are made here.

    Args:
        token: Raw token such as "1080p30" or "720p"

    Returns:
        TranscodeProfile candidate, or Rejection with a malformed-* reason
    """
    segments = token.strip().split(TOKEN_SEPARATOR)

    resolution = _parse_positive_int(segments[0])
    if resolution is None:
        return Rejection(token, RejectReason.MALFORMED_RESOLUTION, f"invalid resolution {segments[0]!r}")

    if len(segments) > 2:
        return Rejection(token, RejectReason.MALFORMED_FRAMERATE, f"unexpected {TOKEN_SEPARATOR!r} after framerate")

    framerate = DEFAULT_FRAMERATE
    if len(segments) > 1 and segments[1]:
        parsed = _parse_positive_int(segments[1])
        if parsed is None:
            return Rejection(token, RejectReason.MALFORMED_FRAMERATE, f"invalid framerate {segments[1]!r}")
        framerate = parsed

    return TranscodeProfile(resolution=resolution, framerate=framerate)


def validate_candidate(
    candidate: TranscodeProfile, source: SourceCapabilities, token: str | None = None
) -> TranscodeProfile | Rejection:
    """
    Check a candidate against the source stream.

    Rules, in order:
    1. Resolution above the source is rejected (never upscale)
    2. Framerate above the source is clamped to the source framerate
    3. A target identical to the source after clamping is rejected

    Same-resolution candidates with a lower framerate are accepted.

    Args:
        candidate: Parsed candidate
        source: Source capabilities for this pass
        token: Original token, used in rejections and log lines

    Returns:
        Accepted (possibly clamped) profile, or Rejection
    """
    token = token if token is not None else candidate.label

    if candidate.resolution > source.resolution:
        return Rejection(
            token,
            RejectReason.NOT_SMALLER_THAN_SOURCE,
            f"source resolution is {source.resolution}",
        )

    if candidate.framerate > source.framerate:
        logger.info(f"Lowering transcode framerate for {token}: source framerate is {source.framerate}")
        candidate = TranscodeProfile(resolution=candidate.resolution, framerate=source.framerate)

    if candidate.resolution == source.resolution and candidate.framerate == source.framerate:
        return Rejection(
            token,
            RejectReason.IDENTICAL_TO_SOURCE,
            f"source is already {source.resolution}{TOKEN_SEPARATOR}{source.framerate}",
        )

    return candidate


def deduplicate(candidates: Iterable[TranscodeProfile]) -> list[TranscodeProfile]:
    """
    Keep one profile per resolution, preferring the highest framerate.

    Candidates are stable-sorted by (resolution desc, framerate desc) and
    scanned once, so the output is already in final order.
    """
    ordered = sorted(candidates, key=lambda c: (-c.resolution, -c.framerate))

    best: dict[int, int] = {}
    unique = []
    for candidate in ordered:
        previous = best.get(candidate.resolution)
        if previous is None or candidate.framerate > previous:
            best[candidate.resolution] = candidate.framerate
            unique.append(candidate)

    return unique


def resolve(tokens: Iterable[str], source: SourceCapabilities) -> ResolutionResult:
    """
    Run a full resolution pass over raw tokens.

    Malformed and rejected tokens are logged and skipped; they never abort
    the pass.

    Args:
        tokens: Raw tokens in configuration order
        source: Source capabilities sampled for this pass

    Returns:
        ResolutionResult with ordered profiles and per-token rejections
    """
    result = ResolutionResult()
    accepted = []

    for token in tokens:
        parsed = parse_token(token)
        if isinstance(parsed, TranscodeProfile):
            validated = validate_candidate(parsed, source, token)
            if isinstance(validated, TranscodeProfile) and validated.framerate != parsed.framerate:
                result.clamped.append(token)
        else:
            validated = parsed

        if isinstance(validated, Rejection):
            logger.warning(f"Skipping transcode value {token!r}: {validated.reason.value} ({validated.detail})")
            result.rejections.append(validated)
            continue

        accepted.append(validated)

    result.profiles = deduplicate(accepted)
    logger.debug(f"Resolved {len(result.profiles)} transcode profile(s) for source {source}")
    return result


def resolve_profiles(tokens: Iterable[str], source: SourceCapabilities) -> list[TranscodeProfile]:
    """Resolve tokens and return only the ordered profiles."""
    return resolve(tokens, source).profiles


__all__ = [
    "RejectReason",
    "Rejection",
    "ResolutionResult",
    "SourceCapabilities",
    "TranscodeProfile",
    "deduplicate",
    "parse_token",
    "resolve",
    "resolve_profiles",
    "validate_candidate",
]
