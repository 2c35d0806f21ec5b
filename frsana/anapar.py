"""Analysis parameters for the S2-S4 section of the fragment separator."""

from __future__ import annotations

import logging
from collections.abc import Mapping, MutableMapping, Sequence
from dataclasses import dataclass
from typing import Any, Optional

log = logging.getLogger(__name__)

ARRAY_KEY = "frsAnaPar"
COUNT_KEY = "frsAnaNumberPar"

# Stored key and attribute name, in the order the values are read back.
_SCALARS: tuple[tuple[str, str], ...] = (
    ("MagnificationS2S4", "mag_s2s4"),
    ("DisperisionS2S4", "disp_s2s4"),
    ("PathS2S4", "path_s2s4"),
    ("ToFS2S4", "tof_s2s4"),
    ("DistTpcS2", "dist_tpc_s2"),
    ("DistTpcS4", "dist_tpc_s4"),
    ("PosFocalS2", "pos_focal_s2"),
    ("PosFocalS4", "pos_focal_s4"),
    ("Rho_S0_S2", "rho_s0_s2"),
    ("Bfield_S0_S2", "bfield_s0_s2"),
    ("Rho_S2_S4", "rho_s2_s4"),
    ("Bfield_S2_S4", "bfield_s2_s4"),
)


class ParameterError(LookupError):
    """Raised when a parameter list lacks an entry or holds a malformed one."""


def _resized(values: Sequence[float], size: int) -> list[float]:
    """Return the values cut or zero-padded to ``size`` entries."""
    kept = [float(v) for v in values[:size]]
    kept.extend([0.0] * (size - len(kept)))
    return kept


@dataclass
class FrsAnaPar:
    """Optics, magnet and angle-correction parameters for S2-S4 analysis."""

    name: str = "frsAnaPar"
    title: str = "FRS S2-S4 Parameters"
    context: str = "FRSANAParContext"
    num_params: int = 3
    mag_s2s4: float = 0.0
    disp_s2s4: float = 0.0
    path_s2s4: float = 0.0
    tof_s2s4: float = 0.0
    dist_tpc_s2: float = 0.0
    dist_tpc_s4: float = 0.0
    pos_focal_s2: float = 0.0
    pos_focal_s4: float = 0.0
    rho_s0_s2: float = 0.0
    bfield_s0_s2: float = 0.0
    rho_s2_s4: float = 0.0
    bfield_s2_s4: float = 0.0
    ana_params: Optional[list[float]] = None
    status: bool = False

    def __post_init__(self) -> None:
        if self.ana_params is None:
            self.ana_params = [0.0] * self.num_params
        else:
            self.ana_params = [float(v) for v in self.ana_params]

    def clear(self) -> None:
        """Mark the container as not initialised."""
        self.status = False

    def put_params(self, params: Optional[MutableMapping[str, Any]]) -> None:
        """Write every parameter into ``params``; a missing list is ignored."""
        log.info("FrsAnaPar.put_params() called")
        if params is None:
            return
        log.info("Array Size: %d", self.num_params)
        self.ana_params = _resized(self.ana_params, self.num_params)
        params[ARRAY_KEY] = list(self.ana_params)
        params[COUNT_KEY] = self.num_params
        for key, attr in _SCALARS:
            params[key] = getattr(self, attr)

    def get_params(self, params: Optional[Mapping[str, Any]]) -> None:
        """Read every parameter from ``params``.

        Raises ParameterError if the list is missing or lacks an entry.
        """
        log.info("FrsAnaPar.get_params() called")
        if params is None:
            raise ParameterError("no parameter list given")
        for key, attr in _SCALARS:
            setattr(self, attr, float(self._fetch(params, key)))
        self.num_params = int(self._fetch(params, COUNT_KEY))
        log.info("Array Size: %d", self.num_params)
        self.ana_params = _resized(self.ana_params, self.num_params)
        values = list(self._fetch(params, ARRAY_KEY))
        if len(values) != self.num_params:
            raise ParameterError(
                f"could not initialize {ARRAY_KEY}: expected {self.num_params} "
                f"values, got {len(values)}"
            )
        self.ana_params = [float(v) for v in values]

    @staticmethod
    def _fetch(params: Mapping[str, Any], key: str) -> Any:
        try:
            return params[key]
        except KeyError:
            raise ParameterError(f"missing parameter {key!r}") from None

    def set_ana_param(self, value: float, index: int) -> None:
        """Store one angle-correction parameter at ``index``."""
        if not 0 <= index < len(self.ana_params):
            raise IndexError(
                f"index {index} out of range for {len(self.ana_params)} parameters"
            )
        self.ana_params[index] = float(value)

    def format_params(self) -> str:
        """Return the three angle-correction parameters as one line."""
        first, second, third = self.ana_params[:3]
        return f"Params = {first:g},{second:g}, {third:g}"