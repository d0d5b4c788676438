from .matcher import MATCH_COLUMNS, find_containing_zones, find_zone, locate, match_points

__all__ = ["MATCH_COLUMNS", "find_containing_zones", "find_zone", "locate", "match_points"]
