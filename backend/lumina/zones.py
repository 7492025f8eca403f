"""Zone directory: static mapping from zone id to anchor coordinate."""
from __future__ import annotations

import logging
from typing import Dict, Mapping, Optional, Sequence

from lumina.config import ZONES
from lumina.models import Vec3

_log = logging.getLogger(__name__)

ORIGIN = Vec3(0.0, 0.0, 0.0)


class ZoneDirectory:
    def __init__(self, anchors: Optional[Mapping[str, Sequence[float]]] = None) -> None:
        source = ZONES if anchors is None else anchors
        self._anchors: Dict[str, Vec3] = {str(zid): Vec3(*map(float, xyz)) for zid, xyz in source.items()}

    def anchor_of(self, zone_id: str) -> Vec3:
        """Anchor for ``zone_id``; unknown ids resolve to the origin."""
        anchor = self._anchors.get(zone_id)
        if anchor is None:
            _log.debug("Unknown zone %r, falling back to origin", zone_id)
            return ORIGIN
        return anchor

    def __contains__(self, zone_id: object) -> bool:
        return zone_id in self._anchors

    def as_dict(self) -> Dict[str, Vec3]:
        return dict(self._anchors)


default_zones = ZoneDirectory()
