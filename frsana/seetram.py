"""Per-second beam counts from the SEETRAM, triggers and scintillator scalers."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Optional

from frsana.seetrampar import SeetramCalPar

log = logging.getLogger(__name__)

# Largest value of the 32-bit clock scaler, used when it wraps around.
CLOCK_WRAP = 4294967295

_CHANNELS: tuple[str, ...] = (
    "acc_trig",
    "free_trig",
    "seetram_new",
    "seetram_old",
    "ic",
    "sci00",
    "sci01",
    "sci02",
)


def _int32(value: int) -> int:
    """Wrap an integer to the signed 32-bit range."""
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


@dataclass(frozen=True)
class FrsMappedData:
    """Scaler readings of one FRS event."""

    clock_1hz: int
    acc_trig: int = 0
    free_trig: int = 0
    seetram_new: int = 0
    seetram_old: int = 0
    ic: int = 0
    sci00: int = 0
    sci01: int = 0
    sci02: int = 0
    clock_10hz: int = 0
    clock_100khz: int = 0


@dataclass(frozen=True)
class SeetramCalData:
    """Counts accumulated during one second of the 1 Hz clock."""

    acc_trig: int
    free_trig: int
    seetram: int
    ic: int
    dummy: int
    sci00: int
    sci01: int
    sci02: int
    clock_1s: int


class SeetramMapped2Cal:
    """Accumulates scaler increments and reports them once per clock second.

    The state is kept between events, so the counts for a second are emitted
    by the first event whose 1 Hz clock has moved on.
    """

    def __init__(self, par: Optional[SeetramCalPar] = None):
        self.par = par
        self._first_event = True
        self._clock = 0
        self._first_clock = 0
        self._counters = dict.fromkeys(_CHANNELS, 0)
        self._counts = dict.fromkeys(_CHANNELS, 0)

    def _latch(self, hit: FrsMappedData) -> None:
        self._counters = {name: _int32(getattr(hit, name)) for name in _CHANNELS}

    def _accumulate(self, hit: FrsMappedData) -> None:
        for name in _CHANNELS:
            step = _int32(getattr(hit, name) - self._counters[name])
            self._counts[name] = _int32(self._counts[name] + step)
        self._latch(hit)

    def _record(self) -> SeetramCalData:
        c = self._counts
        return SeetramCalData(
            acc_trig=c["acc_trig"],
            free_trig=c["free_trig"],
            seetram=c["seetram_new"],
            ic=c["ic"],
            dummy=c["seetram_old"],
            sci00=c["sci00"],
            sci01=c["sci01"],
            sci02=c["sci02"],
            clock_1s=_int32(self._clock - self._first_clock),
        )

    def process(self, mapped: Iterable[FrsMappedData]) -> list[SeetramCalData]:
        """Feed one event's scaler readings; return the seconds completed by it."""
        result: list[SeetramCalData] = []
        for hit in mapped:
            clock = _int32(hit.clock_1hz)
            if self._first_event:
                self._first_event = False
                self._counts = dict.fromkeys(_CHANNELS, 0)
                self._clock = clock
                self._first_clock = clock
                self._latch(hit)

            if clock < self._clock:
                # The clock scaler wrapped: shift the reference and restart counters.
                self._first_clock = _int32(-(CLOCK_WRAP - self._first_clock) + clock)
                self._clock = clock
                self._latch(hit)

            if clock == self._clock:
                self._accumulate(hit)
            else:
                result.append(self._record())
                self._clock = clock
                self._counts = dict.fromkeys(_CHANNELS, 0)
                self._accumulate(hit)
        return result