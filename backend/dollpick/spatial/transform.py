"""
Coordinate Transformation Engine
=================================
Converts store locations from the public business registry into
coordinates a consumer map can display.

The registry publishes positions on the Korean planar survey grid
(**EPSG:5174**, Korea 2000 / Central Belt, metres).  Map clients want
**WGS84** latitude / longitude.  The conversion pipeline is:

1. Parse the raw values (the registry exports text; some rows are
   blank or garbage).
2. Pass through rows that already hold lng/lat degrees (the import
   mixes both formats).
3. Reject values outside the plausible Korean grid extent.
4. Inverse transverse Mercator via ``pyproj``.
5. Add the empirical bias measured against ground truth.
6. Clamp into the Korea bounding box.

Every failure degrades to Seoul city hall.  ``convert`` keeps track of
*why* a coordinate came out the way it did so the HTTP layer can mark
defaulted pins as approximate; ``to_geo`` returns just the coordinate.
"""

from __future__ import annotations

import enum
import logging
import math
from dataclasses import dataclass
from functools import lru_cache

from pyproj import Transformer

logger = logging.getLogger(__name__)


# ── Projection definitions ───────────────────────────────────────
EPSG_5174_PROJ = (
    "+proj=tmerc +lat_0=38 +lon_0=127 +k=1 +x_0=200000 +y_0=500000 "
    "+ellps=GRS80 +units=m +no_defs"
)
WGS84_PROJ = "+proj=longlat +datum=WGS84 +no_defs"

# ── Empirical bias correction ────────────────────────────────────
# Mean offset between projected registry points and surveyed ground
# truth.  Recalibrate here; the projection itself stays untouched.
LAT_BIAS_DEG = 0.002747
LNG_BIAS_DEG = 0.00079

# ── Plausible planar extent (metres) ─────────────────────────────
PLANAR_X_RANGE = (50_000.0, 350_000.0)
PLANAR_Y_RANGE = (0.0, 700_000.0)

# ── Raw values that are already lng/lat degrees ──────────────────
GEOGRAPHIC_X_RANGE = (100.0, 140.0)
GEOGRAPHIC_Y_RANGE = (30.0, 45.0)


# ── Value types ──────────────────────────────────────────────────
@dataclass(frozen=True, slots=True)
class PlanarCoordinate:
    """Easting / northing on the EPSG:5174 grid, in metres."""

    x: float
    y: float


@dataclass(frozen=True, slots=True)
class GeoCoordinate:
    """WGS84 latitude / longitude in degrees."""

    lat: float
    lng: float


@dataclass(frozen=True, slots=True)
class GeoBounds:
    """An axis-aligned lat/lng rectangle."""

    lat_min: float
    lat_max: float
    lng_min: float
    lng_max: float

    def contains(self, coord: GeoCoordinate) -> bool:
        return (
            self.lat_min <= coord.lat <= self.lat_max
            and self.lng_min <= coord.lng <= self.lng_max
        )

    def clamp(self, coord: GeoCoordinate) -> GeoCoordinate:
        return GeoCoordinate(
            lat=max(self.lat_min, min(self.lat_max, coord.lat)),
            lng=max(self.lng_min, min(self.lng_max, coord.lng)),
        )


KOREA_BOUNDS = GeoBounds(lat_min=33.0, lat_max=43.0, lng_min=124.0, lng_max=132.0)

# Seoul city hall.
DEFAULT_COORDINATE = GeoCoordinate(lat=37.5665, lng=126.978)


class CoordinateSource(str, enum.Enum):
    """How a ``GeoConversion`` was produced."""

    PROJECTED = "projected"
    PASSTHROUGH = "passthrough"
    DEFAULT = "default"


@dataclass(frozen=True, slots=True)
class GeoConversion:
    coordinate: GeoCoordinate
    source: CoordinateSource

    @property
    def is_approximate(self) -> bool:
        """True when the input was unusable and the default was substituted."""
        return self.source is CoordinateSource.DEFAULT


def _parse(value) -> float | None:
    """Parse a raw registry value; None for anything non-finite."""
    if value is None or isinstance(value, bool):
        return None
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(parsed):
        return None
    return parsed


def _within(value: float, bounds: tuple[float, float]) -> bool:
    return bounds[0] <= value <= bounds[1]


# ── Coordinate Transformer ───────────────────────────────────────
class CoordinateTransformer:
    """
    Planar (EPSG:5174) → geographic (WGS84) conversion with bias
    correction and Korea bounding-box clamping.

    Instances are stateless apart from the ``pyproj`` transformer and
    may be shared freely.  Neither ``convert`` nor ``to_geo`` raises.

    Parameters
    ----------
    transformer : pyproj.Transformer, optional
        Injected for tests; defaults to the EPSG:5174 → WGS84 pipeline.
    """

    def __init__(self, transformer: Transformer | None = None) -> None:
        self._transformer = transformer or Transformer.from_crs(
            EPSG_5174_PROJ, WGS84_PROJ, always_xy=True
        )

    def convert(self, x, y) -> GeoConversion:
        """Convert raw registry values, reporting how the result was obtained."""
        px = _parse(x)
        py = _parse(y)
        if px is None or py is None:
            logger.debug("Unparseable planar coordinate (%r, %r)", x, y)
            return GeoConversion(DEFAULT_COORDINATE, CoordinateSource.DEFAULT)

        if _within(px, GEOGRAPHIC_X_RANGE) and _within(py, GEOGRAPHIC_Y_RANGE):
            # Clamp is the identity inside Korea; it only bites for
            # degree pairs elsewhere in the pass-through window.
            return GeoConversion(
                KOREA_BOUNDS.clamp(GeoCoordinate(lat=py, lng=px)),
                CoordinateSource.PASSTHROUGH,
            )

        if not (_within(px, PLANAR_X_RANGE) and _within(py, PLANAR_Y_RANGE)):
            logger.debug("Planar coordinate out of range (%s, %s)", px, py)
            return GeoConversion(DEFAULT_COORDINATE, CoordinateSource.DEFAULT)

        try:
            projected = self.project(PlanarCoordinate(px, py))
        except Exception:
            logger.warning(
                "Projection failed for (%s, %s); using default", px, py,
                exc_info=True,
            )
            return GeoConversion(DEFAULT_COORDINATE, CoordinateSource.DEFAULT)

        corrected = GeoCoordinate(
            lat=projected.lat + LAT_BIAS_DEG,
            lng=projected.lng + LNG_BIAS_DEG,
        )
        return GeoConversion(
            KOREA_BOUNDS.clamp(corrected), CoordinateSource.PROJECTED
        )

    def to_geo(self, x, y) -> GeoCoordinate:
        """Convert raw registry values to a map-displayable coordinate."""
        return self.convert(x, y).coordinate

    def project(self, planar: PlanarCoordinate) -> GeoCoordinate:
        """
        Raw inverse projection, without bias or clamping.

        Raises ``ValueError`` when ``pyproj`` yields a non-finite result.
        """
        lng, lat = self._transformer.transform(planar.x, planar.y)
        if not (math.isfinite(lat) and math.isfinite(lng)):
            raise ValueError(f"Non-finite projection result for {planar}")
        return GeoCoordinate(lat=lat, lng=lng)


@lru_cache(maxsize=1)
def get_coordinate_transformer() -> CoordinateTransformer:
    """Shared transformer; building the pyproj pipeline is not free."""
    return CoordinateTransformer()


def to_geo(x, y) -> GeoCoordinate:
    """Module-level shortcut for ``get_coordinate_transformer().to_geo``."""
    return get_coordinate_transformer().to_geo(x, y)
