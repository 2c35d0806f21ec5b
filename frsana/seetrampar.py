"""Calibration parameters for the SEETRAM beam-intensity monitor."""

from __future__ import annotations

import logging
from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass, field
from typing import Any, Optional

from frsana.anapar import ParameterError

log = logging.getLogger(__name__)

FIT_KEY = "SeetramFitPar"


@dataclass
class SeetramCalPar:
    """Number of fit parameters and calibration values for the SEETRAM."""

    name: str = "seetramCalPar"
    title: str = "Seetram Parameters"
    context: str = "SeetramCalParContext"
    num_params_fit: int = 2
    cal_params: list[float] = field(default_factory=lambda: [0.0] * 2)
    status: bool = False

    def clear(self) -> None:
        """Mark the container as not initialised."""
        self.status = False

    def put_params(self, params: Optional[MutableMapping[str, Any]]) -> None:
        """Write the parameters into ``params``; a missing list is ignored."""
        log.info("SeetramCalPar.put_params() called")
        if params is None:
            return
        log.info("Array Size: %d", self.num_params_fit)
        params[FIT_KEY] = self.num_params_fit

    def get_params(self, params: Optional[Mapping[str, Any]]) -> None:
        """Read the parameters from ``params``.

        Raises ParameterError if the list is missing or lacks an entry.
        """
        log.info("SeetramCalPar.get_params() called")
        if params is None:
            raise ParameterError("no parameter list given")
        try:
            value = params[FIT_KEY]
        except KeyError:
            raise ParameterError(f"missing parameter {FIT_KEY!r}") from None
        self.num_params_fit = int(value)

    def set_cal_param(self, value: float, index: int) -> None:
        """Store one calibration parameter at ``index``."""
        if not 0 <= index < len(self.cal_params):
            raise IndexError(
                f"index {index} out of range for {len(self.cal_params)} parameters"
            )
        self.cal_params[index] = float(value)

    def format_params(self) -> str:
        """Return the heading of the parameter listing."""
        return "SeetramCalPar: seetram Parameters: "