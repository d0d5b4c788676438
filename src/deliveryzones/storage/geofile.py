import os
import threading
import uuid
from collections.abc import Sequence
from pathlib import Path

import geopandas as gpd
import pandas as pd
from pyproj import CRS
from shapely.geometry import Polygon as ShapelyPolygon
from shapely.geometry import mapping

from deliveryzones._config import config
from deliveryzones.errors import GeometryDecodeError, StorageError
from deliveryzones.storage.base import ZoneRecord
from deliveryzones.storage.codec import coordinates_from_geojson

logger = config.logger

COLUMNS = ["area_id", "shop_id", "label", "position"]


class GeoFileZoneStore:
    """
    Delivery areas of all shops kept in a single vector file.

    Each row is one area with columns `area_id`, `shop_id`, `label`,
    `position` (order within the shop) and a polygon geometry in the storage
    CRS (`config.storage_crs`, WGS 84). A save rewrites the file into a
    temporary sibling and moves it into place, so readers see either the old
    or the new set.

    Args:
        path: Target file. Created on first save.
        driver: OGR driver name, GeoJSON by default.
    """

    def __init__(self, path: str | os.PathLike, driver: str = "GeoJSON"):
        self.path = Path(path)
        self.driver = driver
        self.crs = CRS.from_user_input(config.storage_crs)
        self._lock = threading.Lock()

    def _read(self) -> gpd.GeoDataFrame | None:
        if not self.path.exists():
            return None
        try:
            gdf = gpd.read_file(self.path)
        except (OSError, RuntimeError, ValueError) as e:
            raise StorageError(f"Failed to read {self.path}: {e}") from e
        missing = [c for c in COLUMNS if c not in gdf.columns]
        if missing and len(gdf) > 0:
            raise StorageError(f"{self.path} misses columns {missing}")
        if gdf.crs is not None and not self.crs.equals(gdf.crs, ignore_axis_order=True):
            raise StorageError(f"CRS mismatch between {self.path}({gdf.crs}) and storage CRS({self.crs}).")
        return gdf

    def _write(self, gdf: gpd.GeoDataFrame) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(f".{self.path.name}.{uuid.uuid4().hex}.tmp")
        try:
            gdf.to_file(tmp_path, driver=self.driver)
            os.replace(tmp_path, self.path)
        except (OSError, RuntimeError, ValueError) as e:
            raise StorageError(f"Failed to write {self.path}: {e}") from e
        finally:
            if tmp_path.exists():
                tmp_path.unlink()

    @staticmethod
    def _to_record(row) -> ZoneRecord:
        label = row["label"] if isinstance(row["label"], str) else ""
        try:
            coordinates = coordinates_from_geojson(mapping(row["geometry"]))
        except (GeometryDecodeError, AttributeError, TypeError) as e:
            raise GeometryDecodeError(f"Invalid geometry for area {row['area_id']!r}: {e}") from e
        return ZoneRecord(id=str(row["area_id"]), label=label, coordinates=coordinates)

    def load_zones(self, shop_id: str) -> list[ZoneRecord]:
        logger.debug(f"load_zones | shop={shop_id} | path={self.path}")
        with self._lock:
            gdf = self._read()
        if gdf is None or len(gdf) == 0:
            return []
        shop_rows = gdf[gdf["shop_id"].astype(str) == str(shop_id)].sort_values("position")
        return [self._to_record(row) for _, row in shop_rows.iterrows()]

    def save_zones(self, shop_id: str, records: Sequence[ZoneRecord]) -> list[ZoneRecord]:
        logger.debug(f"save_zones | shop={shop_id} | count={len(records)} | path={self.path}")
        with self._lock:
            existing = self._read()
            if existing is None or len(existing) == 0:
                others = None
                known: set[str] = set()
            else:
                is_shop = existing["shop_id"].astype(str) == str(shop_id)
                others = existing[~is_shop]
                known = set(existing.loc[is_shop, "area_id"].astype(str))

            rows = []
            canonical: list[ZoneRecord] = []
            seen: set[str] = set()
            for position, record in enumerate(records):
                if len(record.coordinates) < 3:
                    raise StorageError(f"Delivery areas need at least three points (record #{position})", shop_id)
                if record.id is None:
                    area_id = str(uuid.uuid4())
                elif record.id not in known or record.id in seen:
                    raise StorageError(f"Unknown or repeated delivery area id {record.id!r}", shop_id)
                else:
                    area_id = record.id
                seen.add(area_id)
                coordinates = tuple(c.rounded() for c in record.coordinates)
                rows.append(
                    {
                        "area_id": area_id,
                        "shop_id": str(shop_id),
                        "label": record.label,
                        "position": position,
                        "geometry": ShapelyPolygon([(c.longitude, c.latitude) for c in coordinates]),
                    }
                )
                canonical.append(ZoneRecord(id=area_id, label=record.label, coordinates=coordinates))

            parts = []
            if others is not None and len(others) > 0:
                parts.append(others[[*COLUMNS, "geometry"]])
            if rows:
                parts.append(gpd.GeoDataFrame(rows, geometry="geometry", crs=self.crs))
            if parts:
                self._write(gpd.GeoDataFrame(pd.concat(parts, ignore_index=True), geometry="geometry", crs=self.crs))
            elif self.path.exists():
                self.path.unlink()

        pruned = len(known - seen)
        logger.info(f"Stored {len(canonical)} delivery areas | shop={shop_id} | pruned={pruned}")
        return canonical
