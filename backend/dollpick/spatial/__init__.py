"""Spatial subpackage — registry coordinate conversion."""

from dollpick.spatial.transform import (
    DEFAULT_COORDINATE,
    KOREA_BOUNDS,
    CoordinateSource,
    CoordinateTransformer,
    GeoBounds,
    GeoConversion,
    GeoCoordinate,
    PlanarCoordinate,
    get_coordinate_transformer,
    to_geo,
)

__all__ = [
    "DEFAULT_COORDINATE",
    "KOREA_BOUNDS",
    "CoordinateSource",
    "CoordinateTransformer",
    "GeoBounds",
    "GeoConversion",
    "GeoCoordinate",
    "PlanarCoordinate",
    "get_coordinate_transformer",
    "to_geo",
]
