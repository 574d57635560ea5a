from typing import Dict


def init_metrics() -> Dict[str, int | float | dict]:
    return {
        'splits': 0,
        'oversized_rooms': 0,
        'leaf_rooms': 0,
        'door_pairs_checked': 0,
        'doors_placed': 0,
        'doors_offset': 0,
        'doors_centered': 0,
        'door_misses': 0,
        'rooms_pruned': 0,
        'doors_pruned': 0,
        'connectivity_waves': 0,
        'bridges': 0,
        'branch_connections': 0,
        'rooms_dropped': 0,
        'stranded_rooms': 0,
        'connections': 0,
        'door_cells_skipped': 0,
        'floor_cells': 0,
        'door_cells': 0,
        'wall_cells': 0,
        'wall_placements': 0,
        'unmapped_codes': 0,
        'reachable_cells': 0,
        'unreached_cells': 0,
        'runtime_ms': 0.0,
        'phase_ms': {},
    }
