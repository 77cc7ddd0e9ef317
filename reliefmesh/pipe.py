"""Linear range remapping for projecting raw coordinates into scene space.

A :class:`Pipe` maps values from a *domain* interval onto a *range*
interval.  Longitude/latitude pairs are pushed through one Pipe per axis to
get scene-space x/z, and through :data:`UV_PIPE` to get texture coordinates.
:class:`Feature` wraps a sample of values together with a Pipe inferred from
that sample, for scaling whole data columns at once.
"""

from enum import Enum
from typing import NamedTuple

import numpy as np


class Interval(NamedTuple):
    """Ordered ``(start, end)`` pair.  ``start > end`` reverses the mapping."""

    start: float
    end: float

    @property
    def low(self):
        return min(self.start, self.end)

    @property
    def high(self):
        return max(self.start, self.end)


class Overflow(Enum):
    """What to do with values that fall outside a Pipe's domain."""

    EXTEND = "extend"
    SATURATE = "saturate"


def _as_interval(value):
    if isinstance(value, Interval):
        return value
    start, end = value
    return Interval(float(start), float(end))


class Pipe:
    """Linear transform from a domain interval to a range interval.

    Pipes are immutable.  The builder methods :meth:`set_domain`,
    :meth:`fit_to` and :meth:`overflow` return a new Pipe and leave the
    original untouched, so a Pipe can be shared freely.

    Parameters
    ----------
    domain : tuple of float or Interval
        Input interval ``(start, end)``.  A degenerate domain
        (``start == end``) is widened to ``(start, start + 1)``.
    range : tuple of float or Interval
        Output interval ``(start, end)``.
    overflow : Overflow, optional
        ``Overflow.EXTEND`` (default) keeps the linear formula outside the
        domain; ``Overflow.SATURATE`` clamps results into the range.

    Examples
    --------
    >>> Pipe((-1.0, 1.0), (-2.0, 0.0)).apply(2.0)
    1.0
    >>> Pipe((-1.0, 1.0), (-2.0, 0.0), Overflow.SATURATE).apply(2.0)
    0.0
    """

    __slots__ = ("_domain", "_range", "_overflow")

    def __init__(self, domain, range, overflow=Overflow.EXTEND):
        domain = _as_interval(domain)
        if domain.start == domain.end:
            # Avoid division by zero
            domain = Interval(domain.start, domain.start + 1.0)
        if not isinstance(overflow, Overflow):
            raise TypeError(
                f"overflow must be an Overflow member, got {overflow!r}"
            )
        self._domain = domain
        self._range = _as_interval(range)
        self._overflow = overflow

    @classmethod
    def from_values(cls, values):
        """Infer an identity Pipe spanning ``[min(values), max(values)]``.

        An empty sample gives the unit interval ``(0, 1)``.
        """
        values = np.asarray(values, dtype=np.float64).ravel()
        if values.size == 0:
            lo, hi = 0.0, 1.0
        else:
            lo, hi = float(values.min()), float(values.max())
        if lo == hi:
            hi = lo + 1.0
        return cls((lo, hi), (lo, hi))

    @property
    def domain(self):
        return self._domain

    @property
    def range(self):
        return self._range

    @property
    def overflow_policy(self):
        return self._overflow

    def set_domain(self, domain):
        """Return a copy of this Pipe reading from *domain*."""
        return Pipe(domain, self._range, self._overflow)

    def fit_to(self, range):
        """Return a copy of this Pipe writing into *range*."""
        return Pipe(self._domain, range, self._overflow)

    def overflow(self, policy):
        """Return a copy of this Pipe with overflow policy *policy*."""
        return Pipe(self._domain, self._range, policy)

    def apply(self, value):
        """Map *value* from the domain onto the range.

        Parameters
        ----------
        value : float or array-like
            Value(s) in domain units.

        Returns
        -------
        float or np.ndarray
            A float for scalar input, otherwise a float64 array of the
            same shape.
        """
        x = np.asarray(value, dtype=np.float64)
        d0, d1 = self._domain
        r0, r1 = self._range
        t = (x - d0) / (d1 - d0)
        # Lerp form hits both range endpoints exactly at t == 0 and t == 1
        out = (1.0 - t) * r0 + t * r1
        if self._overflow is Overflow.SATURATE:
            out = np.clip(out, self._range.low, self._range.high)
        if out.ndim == 0:
            return float(out)
        return out

    __call__ = apply

    def __eq__(self, other):
        if not isinstance(other, Pipe):
            return NotImplemented
        return (self._domain == other._domain
                and self._range == other._range
                and self._overflow is other._overflow)

    def __hash__(self):
        return hash((self._domain, self._range, self._overflow))

    def __repr__(self):
        return (f"Pipe(domain={tuple(self._domain)}, "
                f"range={tuple(self._range)}, "
                f"overflow={self._overflow.name})")


class Feature:
    """A column of values paired with the Pipe that rescales it.

    The Pipe starts as the identity over ``[min, max]`` of the sample.
    Like :class:`Pipe`, every builder method returns a new Feature.

    >>> Feature([0.0, 1.0, 2.0]).fit_to((-2.0, 0.0)).convert()
    array([-2., -1.,  0.])
    """

    def __init__(self, values, pipe=None):
        self.values = np.asarray(values, dtype=np.float64).ravel()
        self.pipe = pipe if pipe is not None else Pipe.from_values(self.values)

    def __len__(self):
        return len(self.values)

    def set_domain(self, domain):
        return Feature(self.values, self.pipe.set_domain(domain))

    def fit_to(self, range):
        return Feature(self.values, self.pipe.fit_to(range))

    def overflow(self, policy):
        return Feature(self.values, self.pipe.overflow(policy))

    def convert(self):
        """Map every value through the Pipe; returns a float64 array."""
        return np.asarray(self.pipe.apply(self.values), dtype=np.float64)


# Texture coordinates come straight from longitude/latitude degrees
UV_DOMAIN = Interval(-180.0, 180.0)
UV_RANGE = Interval(0.0, 1.0)
UV_PIPE = Pipe(UV_DOMAIN, UV_RANGE, Overflow.SATURATE)

# Default scene extents the demos lay data out in
THEATER_WIDTH = Interval(-5.0, 5.0)
THEATER_HEIGHT = Interval(0.0, 5.0)
THEATER_DEPTH = Interval(-5.0, 5.0)
