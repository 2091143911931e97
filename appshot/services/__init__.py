"""服务层模块."""

from appshot.services.composition_storage import (
    CompositionMetadata,
    CompositionStorage,
)
from appshot.services.layout_generator import (
    LAYOUT_TEMPLATES,
    SCREEN_CONFIGS,
    generate_layers,
    generate_screen,
    get_screen_config,
    get_template_by_id,
    require_template,
    seed_composition,
)

__all__ = [
    # 版式生成
    "LAYOUT_TEMPLATES",
    "SCREEN_CONFIGS",
    "generate_layers",
    "generate_screen",
    "get_screen_config",
    "get_template_by_id",
    "require_template",
    "seed_composition",
    # 作品存储
    "CompositionMetadata",
    "CompositionStorage",
]
