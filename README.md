# frsana

Event-by-event calibration and analysis steps for the detectors of a
fragment separator beam line. Each step is a plain Python object: it is
configured once, then handed the hits of one event and returns the
resulting data records. The package has no dependencies beyond the
standard library.

## Modules

- `frsana.anapar` – `FrsAnaPar`, the optics, magnet and angle-correction
  parameters for the S2-S4 section. `put_params()` writes them into a
  mutable mapping (a `None` mapping is ignored); `get_params()` reads them
  back and raises `ParameterError` if the mapping is `None`, lacks an entry,
  or holds an angle-correction array of the wrong length.
  `set_ana_param(value, index)` raises `IndexError` for an index outside the
  array, and `format_params()` returns the three correction values as one line.
- `frsana.analysis` – `FrsHit2AnaS4(par, offset_aq=0.0, offset_z=0.0)`
  computes Z, A/q, focal-plane positions at S2 and S4, the S2 angle and the
  velocity (`FrsS4Data`). `process(sci_hits, tpc_hits, music_hits)` takes
  `SciSingleTcalData`, TPC hits and `MusicHitData` for one event and returns
  a list with one record, or an empty list if any input is empty. Z is the
  mean of the MUSIC charges above 1.
- `frsana.calibration` – `FrsHit2AnaS4Par(par, rhos, bfields, *, cut_z=..., ...)`
  collects (S4 angle, A/q) points for events whose Z lies within ±0.5 of
  `cut_z`, from `FrsMappedTof` TAC values, TPC hits and MUSIC hits.
  `finish()` stores the optics and the fitted angle correction in the
  `FrsAnaPar` it was given and returns it; it raises `ValueError` if the
  collected points do not allow a straight-line fit. It needs at least four
  bending radii and four magnetic fields.
- `frsana.seetrampar` – `SeetramCalPar`, the SEETRAM calibration
  container, with the same `put_params()` / `get_params()` behaviour.
- `frsana.seetram` – `SeetramMapped2Cal` integrates trigger, SEETRAM,
  ionisation chamber and scintillator scaler increments per second of the
  1 Hz clock (`FrsMappedData` in, `SeetramCalData` out). The state is kept
  between calls, so a second is reported by the first event whose clock has
  moved on; a wrap of the 32-bit clock scaler is handled.
- `frsana.spill` – `FrsRatesSpill` integrates the same kind of counters per
  beam spill (`SpillMappedData` in, `SeetramCalData` out). The spill number,
  counting from 0, is stored in `clock_1s`, and the `sci00` and `sci02`
  fields carry the SCI21 and SCI41 counts.
- `frsana.mw` – `MwMapped2Hit` converts multi-wire chamber TDC times
  (`MwMappedData`) into x/y positions (`MwHitData`) for entries whose control
  sums are valid. It uses `default_calibration()` unless an `MwCalibration`
  is given. `make_hits(mapped)` handles one collection; `process(*args)`
  handles several, skipping any that are `None`.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
from frsana.mw import MwMapped2Hit, MwMappedData
from frsana.seetram import FrsMappedData, SeetramMapped2Cal

to_hit = MwMapped2Hit()
hits = to_hit.process(
    [MwMappedData(det_id=0, an=100.0, xl=600.0, xr=620.0, yu=590.0, yd=610.0)],
    None,  # a chamber without data this event
)

counter = SeetramMapped2Cal()
counter.process([FrsMappedData(clock_1hz=10, seetram_new=100)])
per_second = counter.process([FrsMappedData(clock_1hz=11, seetram_new=250)])
```

The mappings written by `put_params()` hold simple keys, numbers and lists
of numbers, so they can be stored as JSON or in any other format.

## What the package does not do

The package does not turn raw TPC drift and delay-line times into
positions. `FrsHit2AnaS4` and `FrsHit2AnaS4Par` expect the caller to supply
TPC hits as objects with a `detector_id` from 0 to 3 and an `x` position in
mm; an id outside that range raises `ValueError`. There is no command-line
program, no file reader for raw data and no histogram output: events are
passed in as Python objects and results come back as lists of records.