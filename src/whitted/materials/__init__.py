"""Materials module.

Components:
    phong: Phong material with four-term albedo and its field registry
"""

from .phong import (
    GLASS,
    IVORY,
    MIRROR,
    RED_RUBBER,
    Material,
    MaterialParams,
    add_phong_material,
    clear_phong_materials,
    get_phong_material,
    get_phong_material_count,
    make_material,
    validate_material,
)

__all__ = [
    "Material",
    "MaterialParams",
    "make_material",
    "validate_material",
    "add_phong_material",
    "clear_phong_materials",
    "get_phong_material",
    "get_phong_material_count",
    "IVORY",
    "GLASS",
    "RED_RUBBER",
    "MIRROR",
]
