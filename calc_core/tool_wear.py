"""
Tool wear estimation.

Life in hits is derived from a total wear factor (hardness, friction and
temperature of the worked material, divided by the coating factor). The tool
material does not enter the life estimate; it scales the cost factors and the
per-material comparison table only. The result also carries maintenance
checkpoints, relative cost factors and comparison tables against every other
tool material and coating.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping

TOOL_MATERIAL_FACTORS = {
    "D2": 1.0,
    "A2": 0.8,
    "M2": 1.2,
    "M4": 1.5,
    "PM-M4": 2.0,
    "carbide": 4.0,
    "powdered": 2.5,
}
TOOL_MATERIAL_COSTS = {
    "D2": 1.0,
    "A2": 0.9,
    "M2": 1.3,
    "M4": 1.6,
    "PM-M4": 2.2,
    "carbide": 4.5,
    "powdered": 2.8,
}

COATING_FACTORS = {
    "none": 1.0,
    "TiN": 2.5,
    "TiCN": 3.0,
    "TiAlN": 3.2,
    "CrN": 2.2,
    "DLC": 4.0,
    "AlCrN": 3.5,
    "ZrN": 2.0,
    "CVD-diamond": 6.0,
}
COATING_COSTS = {
    "none": 0.0,
    "TiN": 0.25,
    "TiCN": 0.35,
    "TiAlN": 0.40,
    "CrN": 0.30,
    "DLC": 0.70,
    "AlCrN": 0.45,
    "ZrN": 0.28,
    "CVD-diamond": 1.20,
}

REGIME_WEAR_FACTORS = {"room": 1.0, "warm": 1.5, "hot": 2.2}

BASE_LIFE_HITS = 10000
BASE_WEAR_RATE = 0.015  # mm per 10,000 hits, D2 on mild steel
INSPECTION_POINTS = (0.2, 0.4, 0.6, 0.8)
RESHARPEN_AT = 0.6
HOURS_PER_SHIFT = 8
BASE_TOOL_COST = 1.0
RECOMMENDED_COST_EFFECTIVENESS = 1.1

OPERATION_NAMES = {
    "perimeter": "Perimeter Cutting",
    "holes": "Hole Punching",
    "bends": "Bending",
    "forms": "Form Features",
    "draws": "Drawing",
}
OPERATION_TYPES = {
    "perimeter": "perimeter",
    "holes": "hole",
    "bends": "bend",
    "forms": "form",
    "draws": "draw",
}
GENERAL_RECOMMENDATIONS = (
    "Regular tool maintenance is recommended to extend tool life",
    "Consider using hardened tool steel for abrasive materials",
    "Monitor tool wear patterns for early detection of issues",
)


@dataclass(frozen=True)
class Inspection:
    percentage: int
    hits: int
    hours: int
    shifts: int


@dataclass(frozen=True)
class MaintenanceIntervals:
    inspections: tuple[Inspection, ...]
    resharpening: int
    replacement: int

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MaintenanceIntervals":
        return cls(
            inspections=tuple(Inspection(**i) for i in data["inspections"]),
            resharpening=int(data["resharpening"]),
            replacement=int(data["replacement"]),
        )


@dataclass(frozen=True)
class CostFactors:
    base_cost: float
    material_cost_factor: float
    coating_cost_factor: float
    maintenance_cost_factor: float
    initial_tool_cost: float
    cost_per_10k: float


@dataclass(frozen=True)
class MaterialComparison:
    material: str
    life_increase: str
    estimated_life: int
    hours_between_replacements: int
    cost_increase: str
    cost_effectiveness: float
    recommended: bool


@dataclass(frozen=True)
class CoatingComparison:
    coating: str
    life_increase: str
    estimated_life: int
    hours_between_replacements: int
    additional_cost: str
    cost_effectiveness: float
    recommended: bool


@dataclass(frozen=True)
class ToolWearResult:
    operation_type: str
    tool_material: str
    tool_coating: str
    estimated_life_in_hits: int
    hours_until_maintenance: int
    wear_rate: float
    wear_factor: float
    material_hardness_factor: float
    material_friction_factor: float
    temperature_factor: float
    coating_factor: float
    maintenance_intervals: MaintenanceIntervals
    cost_factors: CostFactors
    recommendations: tuple[str, ...]
    material_comparisons: tuple[MaterialComparison, ...]
    coating_comparisons: tuple[CoatingComparison, ...]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ToolWearResult":
        return cls(
            operation_type=data["operation_type"],
            tool_material=data["tool_material"],
            tool_coating=data["tool_coating"],
            estimated_life_in_hits=int(data["estimated_life_in_hits"]),
            hours_until_maintenance=int(data["hours_until_maintenance"]),
            wear_rate=float(data["wear_rate"]),
            wear_factor=float(data["wear_factor"]),
            material_hardness_factor=float(data["material_hardness_factor"]),
            material_friction_factor=float(data["material_friction_factor"]),
            temperature_factor=float(data["temperature_factor"]),
            coating_factor=float(data["coating_factor"]),
            maintenance_intervals=MaintenanceIntervals.from_dict(data["maintenance_intervals"]),
            cost_factors=CostFactors(**data["cost_factors"]),
            recommendations=tuple(data.get("recommendations") or ()),
            material_comparisons=tuple(MaterialComparison(**c) for c in data.get("material_comparisons") or ()),
            coating_comparisons=tuple(CoatingComparison(**c) for c in data.get("coating_comparisons") or ()),
        )


@dataclass(frozen=True)
class OperationToolWear:
    name: str
    wear: ToolWearResult


@dataclass(frozen=True)
class ToolWearReport:
    general: ToolWearResult
    operations: tuple[OperationToolWear, ...]
    recommendations: tuple[str, ...] = GENERAL_RECOMMENDATIONS

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ToolWearReport":
        return cls(
            general=ToolWearResult.from_dict(data["general"]),
            operations=tuple(
                OperationToolWear(name=op["name"], wear=ToolWearResult.from_dict(op["wear"]))
                for op in data.get("operations") or ()
            ),
            recommendations=tuple(data.get("recommendations") or ()),
        )


def hardness_wear_factor(hardness: float | None) -> float:
    h = 100.0 if hardness is None else hardness
    return max(0.2, min((h / 100.0) ** 1.5, 5.0))


def friction_wear_factor(friction: float | None) -> float:
    mu = 0.3 if friction is None else friction
    return max(0.5, min((mu / 0.3) ** 2, 3.0))


def wear_rate(hardness: float | None, friction: float | None) -> float:
    """mm per 10,000 hits, uncoated."""
    h = 100.0 if hardness is None else hardness
    mu = 0.3 if friction is None else friction
    return round(BASE_WEAR_RATE * (h / 100.0) * (mu / 0.3) ** 1.2, 4)


def maintenance_intervals(estimated_life: int, production_rate: float) -> MaintenanceIntervals:
    inspections = []
    for point in INSPECTION_POINTS:
        hits = round(estimated_life * point)
        hours = round(hits / production_rate)
        inspections.append(
            Inspection(
                percentage=round(point * 100),
                hits=hits,
                hours=hours,
                shifts=math.ceil(hours / HOURS_PER_SHIFT),
            )
        )
    return MaintenanceIntervals(
        inspections=tuple(inspections),
        resharpening=round(estimated_life * RESHARPEN_AT),
        replacement=estimated_life,
    )


def cost_factors(tool_material_factor: float, total_wear_factor: float, tool_coating: str = "none") -> CostFactors:
    material_cost = tool_material_factor**0.8
    coating_cost = COATING_COSTS.get(tool_coating, 0.0)
    maintenance = math.sqrt(total_wear_factor)
    return CostFactors(
        base_cost=BASE_TOOL_COST,
        material_cost_factor=material_cost,
        coating_cost_factor=coating_cost,
        maintenance_cost_factor=maintenance,
        initial_tool_cost=BASE_TOOL_COST * material_cost + coating_cost,
        cost_per_10k=round(BASE_TOOL_COST * material_cost * maintenance, 2),
    )


def _pct(ratio: float) -> str:
    return f"{ratio * 100 - 100:.0f}%"


def material_comparisons(
    current_material: str, current_life: int, production_rate: float
) -> list[MaterialComparison]:
    cur_factor = TOOL_MATERIAL_FACTORS.get(current_material, 1.0)
    cur_cost = TOOL_MATERIAL_COSTS.get(current_material, 1.0)
    out = []
    for name, factor in TOOL_MATERIAL_FACTORS.items():
        if name == current_material:
            continue
        cost = TOOL_MATERIAL_COSTS[name]
        life = round(current_life * (factor / cur_factor))
        effectiveness = round((life / current_life) / (cost / cur_cost), 2) if current_life else 0.0
        out.append(
            MaterialComparison(
                material=name,
                life_increase=_pct(factor / cur_factor),
                estimated_life=life,
                hours_between_replacements=round(life / production_rate),
                cost_increase=_pct(cost / cur_cost),
                cost_effectiveness=effectiveness,
                recommended=effectiveness > RECOMMENDED_COST_EFFECTIVENESS,
            )
        )
    return out


def coating_comparisons(
    current_coating: str, current_life: int, production_rate: float
) -> list[CoatingComparison]:
    cur_factor = COATING_FACTORS.get(current_coating, 1.0)
    cur_total = BASE_TOOL_COST + COATING_COSTS.get(current_coating, 0.0)
    out = []
    for name, factor in COATING_FACTORS.items():
        if name == current_coating:
            continue
        cost = COATING_COSTS[name]
        life = round(current_life * (factor / cur_factor))
        new_total = BASE_TOOL_COST + cost
        effectiveness = round((life / current_life) / (new_total / cur_total), 2) if current_life else 0.0
        out.append(
            CoatingComparison(
                coating=name,
                life_increase=_pct(factor / cur_factor),
                estimated_life=life,
                hours_between_replacements=round(life / production_rate),
                additional_cost="0%" if cost == 0 else f"+{cost * 100:.0f}%",
                cost_effectiveness=effectiveness,
                recommended=effectiveness > RECOMMENDED_COST_EFFECTIVENESS,
            )
        )
    return out


def wear_recommendations(
    operation_type: str,
    properties,
    regime: str,
    total_wear_factor: float,
    tool_coating: str = "none",
) -> list[str]:
    recs: list[str] = []
    hardness = properties.hardness
    friction = properties.friction_coefficient

    if total_wear_factor > 3.0:
        recs.append("Consider higher grade tool materials to increase tool life.")
    if hardness is not None and hardness > 200:
        recs.append("Use carbide tools or inserts for extended tool life.")
    if friction is not None and friction > 0.4:
        recs.append("Apply appropriate lubricant to reduce friction and tool wear.")

    if tool_coating == "none":
        if hardness is not None and hardness > 150:
            recs.append(
                "Apply TiAlN or AlCrN coating to significantly increase tool life for this hard material."
            )
        else:
            recs.append("Consider TiN or TiCN coating to improve wear resistance.")

    if operation_type in ("perimeter", "hole"):
        recs.append("Keep tools sharp to minimize burr formation and reduce wear.")
        recs.append("Maintain proper die clearance to optimize tool life.")
        if tool_coating in ("none", "TiN"):
            recs.append("For cutting operations, AlCrN or TiAlN coatings provide superior performance.")
    elif operation_type == "bend":
        recs.append("Regularly polish tool surfaces to prevent material pickup.")
        if tool_coating == "none":
            recs.append("For bending operations, CrN coatings reduce galling and material pickup.")
    elif operation_type in ("form", "draw"):
        recs.append("Use appropriate surface treatments on tools to prevent galling.")
        recs.append("Implement effective lubrication strategy to maximize tool life.")
        if tool_coating == "none":
            recs.append("For forming operations with high friction, DLC coatings provide optimal performance.")
    else:
        recs.append("Follow manufacturer guidelines for maintenance and lubrication.")

    if regime in ("warm", "hot"):
        recs.append("Consider tool steel grades designed for elevated temperatures.")
        if tool_coating not in ("TiAlN", "AlCrN"):
            recs.append(
                "For elevated temperatures, TiAlN and AlCrN coatings maintain hardness better than other coatings."
            )

    return recs


def calculate_tool_wear(
    material,
    operation_type: str,
    tool_material: str = "D2",
    production_rate: float = 100,
    tool_coating: str = "none",
) -> ToolWearResult | None:
    if material is None:
        return None
    if production_rate <= 0:
        raise ValueError("production_rate must be positive")

    props = material.properties
    regime = material.regime
    tool_factor = TOOL_MATERIAL_FACTORS.get(tool_material, 1.0)
    coating = COATING_FACTORS.get(tool_coating, 1.0)

    hardness_factor = hardness_wear_factor(props.hardness)
    friction_factor = friction_wear_factor(props.friction_coefficient)
    temperature_factor = REGIME_WEAR_FACTORS.get(regime, 1.0)
    total = hardness_factor * friction_factor * temperature_factor / coating

    life = round(BASE_LIFE_HITS / (BASE_WEAR_RATE * total) * coating)

    return ToolWearResult(
        operation_type=operation_type,
        tool_material=tool_material,
        tool_coating=tool_coating,
        estimated_life_in_hits=life,
        hours_until_maintenance=round(life / production_rate),
        wear_rate=wear_rate(props.hardness, props.friction_coefficient) / coating,
        wear_factor=total,
        material_hardness_factor=hardness_factor,
        material_friction_factor=friction_factor,
        temperature_factor=temperature_factor,
        coating_factor=coating,
        maintenance_intervals=maintenance_intervals(life, production_rate),
        cost_factors=cost_factors(tool_factor, total, tool_coating),
        recommendations=tuple(wear_recommendations(operation_type, props, regime, total, tool_coating)),
        material_comparisons=tuple(material_comparisons(tool_material, life, production_rate)),
        coating_comparisons=tuple(coating_comparisons(tool_coating, life, production_rate)),
    )


def tool_wear_report(material, enabled_categories) -> ToolWearReport | None:
    """General D2 estimate plus one entry per enabled operation category."""
    if material is None:
        return None
    operations = tuple(
        OperationToolWear(
            name=OPERATION_NAMES[category],
            wear=calculate_tool_wear(material, OPERATION_TYPES[category], "D2", 100),
        )
        for category in enabled_categories
    )
    return ToolWearReport(
        general=calculate_tool_wear(material, "general", "D2", 100),
        operations=operations,
    )
