"""Weight table lookup for changed production units."""

from __future__ import annotations

from diffweight.analysis.units import SemanticUnit, UnitKind
from diffweight.config.schema import DiffWeightConfig


def calculate_weight(unit: SemanticUnit, config: DiffWeightConfig) -> int:
    """Return the configured weight for *unit*'s kind and visibility."""
    weights = config.weights
    public = unit.visibility.is_public()
    kind = unit.kind

    if kind == UnitKind.FUNCTION:
        return weights.public_function if public else weights.private_function
    if kind in (UnitKind.STRUCT, UnitKind.ENUM):
        return weights.public_struct if public else weights.private_struct
    if kind == UnitKind.IMPL:
        return weights.impl_block
    if kind == UnitKind.TRAIT:
        return weights.trait_definition
    if kind == UnitKind.MACRO:
        return weights.private_function
    # const, static, type alias, module
    return weights.const_static
