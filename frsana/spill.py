"""Beam counts integrated over each extraction spill of the synchrotron."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from frsana.seetram import SeetramCalData, _int32

log = logging.getLogger(__name__)

_CHANNELS: tuple[str, ...] = (
    "acc_trig",
    "free_trig",
    "seetram_new",
    "seetram_old",
    "ic01",
    "sci00",
    "sci01",
    "sci02",
    "sci21l",
    "sci41l",
)


@dataclass(frozen=True)
class SpillMappedData:
    """Scaler readings of one event, with the spill start and stop counters."""

    start_ext: int
    stop_ext: int
    acc_trig: int = 0
    free_trig: int = 0
    seetram_new: int = 0
    seetram_old: int = 0
    ic01: int = 0
    sci00: int = 0
    sci01: int = 0
    sci02: int = 0
    sci21l: int = 0
    sci41l: int = 0
    clock_1hz: int = 0
    clock_10hz: int = 0
    clock_100khz: int = 0


class FrsRatesSpill:
    """Accumulates scaler increments and reports them once per spill.

    A spill stays open while the stop counter is unchanged; the counts of a
    spill are emitted by the first event that leaves it. The spill number is
    stored in the ``clock_1s`` field of each record, counting from 0. The
    ``sci00`` and ``sci02`` fields of a record hold the SCI21 and SCI41 counts.
    """

    def __init__(self) -> None:
        self.spill = 0
        self._first_event = True
        self._start = 0
        self._stop = 0
        self._clock_1hz = 0
        self._counters = dict.fromkeys(_CHANNELS, 0)
        self._counts = dict.fromkeys(_CHANNELS, 0)

    def _latch(self, hit: SpillMappedData) -> None:
        self._counters = {name: _int32(getattr(hit, name)) for name in _CHANNELS}

    def _accumulate(self, hit: SpillMappedData) -> None:
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
            ic=c["ic01"],
            dummy=c["seetram_old"],
            sci00=c["sci21l"],
            sci01=c["sci01"],
            sci02=c["sci41l"],
            clock_1s=self.spill,
        )

    def process(self, mapped: Iterable[SpillMappedData]) -> list[SeetramCalData]:
        """Feed one event's scaler readings; return the spills completed by it."""
        result: list[SeetramCalData] = []
        for hit in mapped:
            start = _int32(hit.start_ext)
            stop = _int32(hit.stop_ext)
            if self._first_event:
                self._first_event = False
                self._counts = dict.fromkeys(_CHANNELS, 0)
                self._clock_1hz = _int32(hit.clock_1hz)
                self._latch(hit)
                self._start = start
                self._stop = stop

            if start == self._start and stop == self._stop:
                continue
            if start > self._start and stop == self._stop:
                self._accumulate(hit)
                continue

            log.debug("spill %d ends at stop counter %d", self.spill, stop)
            result.append(self._record())
            self.spill = _int32(self.spill + 1)
            self._clock_1hz = _int32(hit.clock_1hz)
            self._counts = dict.fromkeys(_CHANNELS, 0)
            self._accumulate(hit)
            self._start = start
            self._stop = stop
        return result