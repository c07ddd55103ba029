# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

from .constants import DEFAULT_SIGN_EXPIRES, WINDOW_SEPARATOR
from .exceptions import InvalidWindowError


def _now() -> int:
    return int(datetime.now(UTC).timestamp())


@dataclass(frozen=True)
class SigningWindow:
    """The span of unix seconds in which a signing key and its signature are valid.

    The same window is claimed as both ``q-sign-time`` and ``q-key-time``.
    """

    start_time: int
    end_time: int

    @classmethod
    def from_now(
        cls, expires_in: int = DEFAULT_SIGN_EXPIRES, *, now: int | None = None
    ) -> SigningWindow:
        """Create a window opening at the current time.

        :param expires_in: Seconds until the window closes.
        :param now: Override for the current unix time.
        """
        start = _now() if now is None else now
        window = cls(start_time=start, end_time=start + expires_in)
        window.validate()
        return window

    @classmethod
    def parse(cls, value: str) -> SigningWindow:
        """Parse the ``<start>;<end>`` wire form of a window."""
        start, sep, end = value.partition(WINDOW_SEPARATOR)
        if not sep or not start.isdigit() or not end.isdigit():
            raise InvalidWindowError(f"Malformed signing window: {value!r}")
        window = cls(start_time=int(start), end_time=int(end))
        window.validate()
        return window

    def validate(self) -> None:
        for bound in (self.start_time, self.end_time):
            # bool is an int subclass but never a timestamp
            if not isinstance(bound, int) or isinstance(bound, bool):
                raise InvalidWindowError(
                    f"Window bounds must be integers, got {bound!r}."
                )
            if bound <= 0:
                raise InvalidWindowError(
                    f"Window bounds must be positive, got {bound}."
                )
        if self.end_time <= self.start_time:
            raise InvalidWindowError(
                f"Window end {self.end_time} must be after start {self.start_time}."
            )

    def contains(self, timestamp: int, *, skew: int = 0) -> bool:
        return self.start_time - skew <= timestamp <= self.end_time + skew

    def __str__(self) -> str:
        return f"{self.start_time}{WINDOW_SEPARATOR}{self.end_time}"
