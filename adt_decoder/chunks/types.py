"""Shared value types"""
from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class Vector3D:
    x: float
    y: float
    z: float

    def to_dict(self) -> Dict[str, float]:
        return {
            'x': self.x,
            'y': self.y,
            'z': self.z
        }


@dataclass(frozen=True)
class CAaBox:
    """Axis aligned bounding box"""
    min: Vector3D
    max: Vector3D

    def to_dict(self) -> Dict[str, Dict[str, float]]:
        return {'min': self.min.to_dict(), 'max': self.max.to_dict()}
