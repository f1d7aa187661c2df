"""
Descriptive observation metadata attached to a time series.

Every field is optional. Reading a field that was never set returns a
sentinel (NaN for numbers, an empty string for text) and logs a warning;
the ``*_is_set`` companions tell "absent" apart from "zero" or "empty".
"""

from typing import Any, Dict, Optional, Sequence, Tuple
import logging
import math

logger = logging.getLogger(__name__)

_PAIR_FIELDS = ('target_ra_dec', 'energy_range', 'date_obs_end', 'time_obs_end')
_FIELDS = (
    'telescope',
    'instrument',
    'target_name',
    'target_ra_dec',
    'energy_range',
    'date_obs_end',
    'time_obs_end',
    'mjdref',
    'rel_time_error',
    'abs_time_error',
)


def _as_pair(name: str, value: Sequence[Any], cast) -> Tuple[Any, Any]:
    values = tuple(value)
    if len(values) != 2:
        raise ValueError(f"{name} must have exactly 2 elements, got {len(values)}")
    return cast(values[0]), cast(values[1])


class ObservationMetadata:
    """
    Observation attributes of a light curve.

    Parameters
    ----------
    telescope : str or None, optional
        Telescope or mission name.
    instrument : str or None, optional
        Instrument name.
    target_name : str or None, optional
        Name of the observed source.
    target_ra_dec : (float, float) or None, optional
        Target right ascension and declination in degrees.
    energy_range : (float, float) or None, optional
        Minimum and maximum energy of the events, in keV.
    date_obs_end : (str, str) or None, optional
        DATE-OBS and DATE-END strings.
    time_obs_end : (str, str) or None, optional
        TIME-OBS and TIME-END strings.
    mjdref : float or None, optional
        MJD of the time reference.
    rel_time_error : float or None, optional
        Relative timing error.
    abs_time_error : float or None, optional
        Absolute timing error (seconds).

    Examples
    --------
    >>> meta = ObservationMetadata(telescope='INTEGRAL', instrument='ISGRI')
    >>> meta.telescope
    'INTEGRAL'
    >>> meta.mjdref_is_set
    False
    >>> meta = meta.replace(mjdref=51544.0)
    >>> meta.mjdref
    51544.0
    """

    def __init__(
        self,
        telescope: Optional[str] = None,
        instrument: Optional[str] = None,
        target_name: Optional[str] = None,
        target_ra_dec: Optional[Sequence[float]] = None,
        energy_range: Optional[Sequence[float]] = None,
        date_obs_end: Optional[Sequence[str]] = None,
        time_obs_end: Optional[Sequence[str]] = None,
        mjdref: Optional[float] = None,
        rel_time_error: Optional[float] = None,
        abs_time_error: Optional[float] = None,
    ):
        self._telescope = str(telescope) if telescope is not None else None
        self._instrument = str(instrument) if instrument is not None else None
        self._target_name = str(target_name) if target_name is not None else None
        self._target_ra_dec = (
            _as_pair('target_ra_dec', target_ra_dec, float) if target_ra_dec is not None else None
        )
        self._energy_range = (
            _as_pair('energy_range', energy_range, float) if energy_range is not None else None
        )
        if self._energy_range is not None and self._energy_range[0] > self._energy_range[1]:
            raise ValueError(
                f"energy_range minimum ({self._energy_range[0]}) must be <= "
                f"maximum ({self._energy_range[1]})"
            )
        self._date_obs_end = (
            _as_pair('date_obs_end', date_obs_end, str) if date_obs_end is not None else None
        )
        self._time_obs_end = (
            _as_pair('time_obs_end', time_obs_end, str) if time_obs_end is not None else None
        )
        self._mjdref = float(mjdref) if mjdref is not None else None
        self._rel_time_error = float(rel_time_error) if rel_time_error is not None else None
        self._abs_time_error = float(abs_time_error) if abs_time_error is not None else None

    def replace(self, **fields: Any) -> 'ObservationMetadata':
        """
        Return a copy with some fields replaced.

        Passing ``None`` for a field unsets it.

        Raises
        ------
        TypeError
            If an unknown field name is given.
        """
        unknown = set(fields) - set(_FIELDS)
        if unknown:
            raise TypeError(f"Unknown metadata fields: {sorted(unknown)}")
        current = {name: getattr(self, f"_{name}") for name in _FIELDS}
        current.update(fields)
        return ObservationMetadata(**current)

    def as_dict(self) -> Dict[str, Any]:
        """Get the fields that are set, keyed by name."""
        return {
            name: getattr(self, f"_{name}")
            for name in _FIELDS
            if getattr(self, f"_{name}") is not None
        }

    @staticmethod
    def _unset(what: str, returning: str):
        logger.warning("%s not defined: Returning %s", what, returning)

    # ========================================
    # Text fields
    # ========================================

    @property
    def telescope(self) -> str:
        if self._telescope is None:
            self._unset("Telescope is", "empty string")
            return ""
        return self._telescope

    @property
    def telescope_is_set(self) -> bool:
        return self._telescope is not None

    @property
    def instrument(self) -> str:
        if self._instrument is None:
            self._unset("Instrument is", "empty string")
            return ""
        return self._instrument

    @property
    def instrument_is_set(self) -> bool:
        return self._instrument is not None

    @property
    def target_name(self) -> str:
        if self._target_name is None:
            self._unset("Target name is", "empty string")
            return ""
        return self._target_name

    @property
    def target_name_is_set(self) -> bool:
        return self._target_name is not None

    # ========================================
    # Target position
    # ========================================

    @property
    def target_ra_dec(self) -> Tuple[float, float]:
        if self._target_ra_dec is None:
            self._unset("Target RA, Dec are", "NaN")
            return (math.nan, math.nan)
        return self._target_ra_dec

    @property
    def target_ra(self) -> float:
        return self.target_ra_dec[0]

    @property
    def target_dec(self) -> float:
        return self.target_ra_dec[1]

    @property
    def target_ra_dec_are_set(self) -> bool:
        return self._target_ra_dec is not None

    # ========================================
    # Energy range
    # ========================================

    @property
    def energy_range(self) -> Tuple[float, float]:
        if self._energy_range is None:
            self._unset("Energy range is", "NaN")
            return (math.nan, math.nan)
        return self._energy_range

    @property
    def energy_range_min(self) -> float:
        return self.energy_range[0]

    @property
    def energy_range_max(self) -> float:
        return self.energy_range[1]

    @property
    def energy_range_is_set(self) -> bool:
        return self._energy_range is not None

    # ========================================
    # Dates and times of observation
    # ========================================

    @property
    def date_obs_end(self) -> Tuple[str, str]:
        if self._date_obs_end is None:
            self._unset("DATE-OBS and DATE-END are", "empty strings")
            return ("", "")
        return self._date_obs_end

    @property
    def date_obs(self) -> str:
        return self.date_obs_end[0]

    @property
    def date_end(self) -> str:
        return self.date_obs_end[1]

    @property
    def date_obs_end_are_set(self) -> bool:
        return self._date_obs_end is not None

    @property
    def time_obs_end(self) -> Tuple[str, str]:
        if self._time_obs_end is None:
            self._unset("TIME-OBS and TIME-END are", "empty strings")
            return ("", "")
        return self._time_obs_end

    @property
    def time_obs(self) -> str:
        return self.time_obs_end[0]

    @property
    def time_end(self) -> str:
        return self.time_obs_end[1]

    @property
    def time_obs_end_are_set(self) -> bool:
        return self._time_obs_end is not None

    # ========================================
    # Time reference and errors
    # ========================================

    @property
    def mjdref(self) -> float:
        if self._mjdref is None:
            self._unset("MJD ref is", "NaN")
            return math.nan
        return self._mjdref

    @property
    def mjdref_is_set(self) -> bool:
        return self._mjdref is not None

    @property
    def rel_time_error(self) -> float:
        if self._rel_time_error is None:
            self._unset("Relative time error is", "NaN")
            return math.nan
        return self._rel_time_error

    @property
    def rel_time_error_is_set(self) -> bool:
        return self._rel_time_error is not None

    @property
    def abs_time_error(self) -> float:
        if self._abs_time_error is None:
            self._unset("Absolute time error is", "NaN")
            return math.nan
        return self._abs_time_error

    @property
    def abs_time_error_is_set(self) -> bool:
        return self._abs_time_error is not None

    @property
    def time_errors(self) -> Tuple[float, float]:
        """Get (relative, absolute) time errors."""
        return (self.rel_time_error, self.abs_time_error)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ObservationMetadata):
            return NotImplemented
        return self.as_dict() == other.as_dict()

    def __hash__(self) -> int:
        return hash(tuple(sorted(self.as_dict().items())))

    def __repr__(self) -> str:
        fields = ", ".join(f"{k}={v!r}" for k, v in self.as_dict().items())
        return f"ObservationMetadata({fields})"
