from typing import Dict


def init_metrics() -> Dict[str, int | float]:
    return {
        'rooms': 0,
        'room_attempts': 0,
        'doors': 0,
        'doors_dropped': 0,
        'stairs': 0,
        'stairs_skipped': 0,
        'corridor_cells': 0,
        'links_carved': 0,
        'isolated_components': 0,
        'deadends_removed': 0,
        'runtime_ms': 0.0,
    }
