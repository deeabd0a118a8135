"""
Spatial ordering utilities for pyGeoSynth.

This subpackage contains the Morton (Z-order) encoder used to reorder
location sets for tile-level locality:
- Bit spreading and compaction over 16-bit axis values
- Morton keys and the key-based point comparator
- Stable, partitioned in-place reordering of location sets
"""

from .morton import (
    spread_bits,
    reverse_spread_bits,
    quantize,
    interleave,
    morton_key,
    compare_uint64,
    compare_morton,
    location_keys,
    sort_locations,
)

__all__ = [
    "spread_bits",
    "reverse_spread_bits",
    "quantize",
    "interleave",
    "morton_key",
    "compare_uint64",
    "compare_morton",
    "location_keys",
    "sort_locations",
]
