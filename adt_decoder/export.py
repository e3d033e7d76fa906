"""
JSON and image export of decoded terrain.
"""
import dataclasses
import json
import logging
from enum import Enum
from pathlib import Path
from typing import Any, List, Union

import numpy as np
from PIL import Image

from .files.adt import AdtFile
from .files.wdt import WdtFile

logger = logging.getLogger(__name__)


class TerrainEncoder(json.JSONEncoder):
    """JSON encoder for decoded terrain structures"""

    def default(self, obj: Any) -> Any:
        if hasattr(obj, 'to_dict'):
            return obj.to_dict()
        if dataclasses.is_dataclass(obj):
            return {
                field.name: getattr(obj, field.name)
                for field in dataclasses.fields(obj)
            }
        if isinstance(obj, np.ndarray):
            return obj.tolist()
        if isinstance(obj, np.generic):
            return obj.item()
        if isinstance(obj, Enum):
            return obj.value
        if isinstance(obj, Path):
            return str(obj)
        if isinstance(obj, bytes):
            return obj.hex()
        return super().default(obj)


def save_json(decoded: Union[AdtFile, WdtFile], output_dir: Path,
              include_alpha: bool = False) -> Path:
    """
    Save a decoded file as JSON

    Args:
        decoded: Decoded ADT or WDT
        output_dir: Directory to save the JSON file in
        include_alpha: Write full alpha mask values (large)

    Returns:
        Path to saved JSON file
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    stem = decoded.path.stem if decoded.path else 'terrain'
    json_path = output_dir / f"{stem}.json"

    if isinstance(decoded, AdtFile):
        payload = decoded.to_dict(include_alpha=include_alpha)
    else:
        payload = decoded

    with open(json_path, 'w', encoding='utf-8') as f:
        json.dump(payload, f, cls=TerrainEncoder, indent=2)

    logger.info(f"Results written to {json_path}")
    return json_path


def alpha_to_image(values: np.ndarray, wide_alpha: bool) -> Image.Image:
    """Greyscale image of one mask. 4-bit values are scaled to 0-255."""
    pixels = np.asarray(values, dtype=np.uint8)
    if not wide_alpha:
        pixels = pixels * np.uint8(17)
    return Image.fromarray(np.ascontiguousarray(pixels))


def save_alpha_pngs(adt: AdtFile, output_dir: Path) -> List[Path]:
    """Write one 64x64 PNG per decoded alpha mask.

    Files are named <stem>_<tile x>_<tile y>_layer<n>.png.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    stem = adt.path.stem if adt.path else 'terrain'

    written = []
    for tile in adt.tiles:
        for mask in tile.alpha_masks:
            png_path = output_dir / f"{stem}_{tile.grid_x}_{tile.grid_y}_layer{mask.layer_index}.png"
            alpha_to_image(mask.values, adt.file_flags.wide_alpha).save(png_path)
            written.append(png_path)

    logger.info(f"Wrote {len(written)} alpha masks to {output_dir}")
    return written
