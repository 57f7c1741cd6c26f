from .config import BoardConfig, Detection, Geometry, SprintResolution, config_from_dict, load_config
from .grouping import columns_needed, group_team, group_tickets
from .synthesizer import LayoutSynthesizer, synthesize

__all__ = [
    "BoardConfig",
    "Detection",
    "Geometry",
    "LayoutSynthesizer",
    "SprintResolution",
    "columns_needed",
    "config_from_dict",
    "group_team",
    "group_tickets",
    "load_config",
    "synthesize",
]
