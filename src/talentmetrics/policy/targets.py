"""Daily resume targets per requirement, keyed by criticality and toughness."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from talentmetrics.exceptions import UnknownTargetPolicyError
from talentmetrics.models import Criticality, Toughness

if TYPE_CHECKING:
    from talentmetrics.settings import AppSettings

logger = logging.getLogger(__name__)

# Resumes one recruiter owes per requirement per day.
RESUME_TARGET_MATRIX: dict[Criticality, dict[Toughness, int]] = {
    Criticality.LOW: {
        Toughness.EASY: 5,
        Toughness.MEDIUM: 4,
        Toughness.TOUGH: 3,
    },
    Criticality.MEDIUM: {
        Toughness.EASY: 4,
        Toughness.MEDIUM: 3,
        Toughness.TOUGH: 2,
    },
    Criticality.HIGH: {
        Toughness.EASY: 3,
        Toughness.MEDIUM: 2,
        Toughness.TOUGH: 1,
    },
}

# Used for missing or unrecognised criticality/toughness values.
DEFAULT_RESUME_TARGET = 3


def _parse_criticality(value: Criticality | str | None) -> Criticality | None:
    if isinstance(value, Criticality):
        return value
    if not value:
        return None
    try:
        return Criticality(str(value).strip().upper())
    except ValueError:
        return None


def _parse_toughness(value: Toughness | str | None) -> Toughness | None:
    if isinstance(value, Toughness):
        return value
    if not value:
        return None
    try:
        return Toughness(str(value).strip().capitalize())
    except ValueError:
        return None


class TargetPolicy:
    """Lookup of required resumes with an explicit fallback.

    With ``fallback=None`` the policy is strict and raises
    :class:`UnknownTargetPolicyError` instead of falling back.
    """

    def __init__(
        self,
        matrix: dict[Criticality, dict[Toughness, int]] | None = None,
        fallback: int | None = DEFAULT_RESUME_TARGET,
    ) -> None:
        self._matrix = matrix if matrix is not None else RESUME_TARGET_MATRIX
        if fallback is not None and fallback < 0:
            raise ValueError("fallback target must be non-negative")
        self._fallback = fallback

    @property
    def strict(self) -> bool:
        return self._fallback is None

    def required_resumes(
        self,
        criticality: Criticality | str | None,
        toughness: Toughness | str | None,
    ) -> int:
        crit = _parse_criticality(criticality)
        tough = _parse_toughness(toughness)
        target = None
        if crit is not None and tough is not None:
            target = self._matrix.get(crit, {}).get(tough)
        if target is not None:
            return target

        if self._fallback is None:
            raise UnknownTargetPolicyError(
                f"No resume target for criticality={criticality!r}, toughness={toughness!r}."
            )
        logger.warning(
            "No resume target for criticality=%r, toughness=%r; using fallback %d.",
            criticality,
            toughness,
            self._fallback,
        )
        return self._fallback

    @classmethod
    def from_settings(cls, settings: "AppSettings") -> "TargetPolicy":
        if settings.strict_target_policy:
            return cls(fallback=None)
        return cls(fallback=settings.fallback_resume_target)


_DEFAULT_POLICY = TargetPolicy()


def required_resumes(
    criticality: Criticality | str | None,
    toughness: Toughness | str | None,
) -> int:
    """Return the daily resume target using the default (fallback) policy."""
    return _DEFAULT_POLICY.required_resumes(criticality, toughness)
