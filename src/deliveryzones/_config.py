import sys
from typing import Literal

from loguru import logger


class Config:

    def __init__(self):
        self.logger = logger
        self.coordinate_precision = 6
        self.default_label_template = "Zone {index}"
        self.boundary_is_inside = True
        self.reject_self_intersecting = True
        self.storage_crs = "EPSG:4326"

    def change_logger_lvl(self, lvl: Literal["TRACE", "DEBUG", "INFO", "WARN", "ERROR"]):
        self.logger.remove()
        self.logger.add(sys.stderr, level=lvl)

    def default_label(self, index: int) -> str:
        """Label for the zone at 0-based position `index`."""
        return self.default_label_template.format(index=index + 1)


config = Config()
config.change_logger_lvl("INFO")
