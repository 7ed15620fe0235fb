"""
Value types consumed by the calculation engine.

Every record is immutable. Optional fields and defaults are resolved here, in
the from_dict constructors, so the formulas never see a missing value they
did not ask for.
"""

from __future__ import annotations

import math
import uuid
from dataclasses import asdict, dataclass, field, replace
from typing import Any, Mapping

from .temperature import regime_of
from .units import MM_PER_INCH, fahrenheit_to_celsius, inch_to_mm

REGIMES = ("room", "warm", "hot")
CATEGORIES = ("perimeter", "holes", "bends", "forms", "draws")
ITEM_CATEGORIES = ("holes", "bends", "forms", "draws")

HOLE_SHAPES = ("circular", "square", "rectangular")
BEND_TYPES = ("v-bend", "u-bend", "air-bend", "bottoming")
FORM_TYPES = ("emboss", "dimple", "louver", "bead", "rib")
DRAW_TYPES = ("round", "rectangular", "irregular", "tapered")

DEFAULT_REVERSE_FACTOR = 0.7
DEFAULT_TEMPERATURE_COEFFICIENT = 0.0002


def _uuid() -> str:
    return str(uuid.uuid4())


def _pick(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return None


def _optional_float(value: object, field_name: str) -> float | None:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise TypeError(f"{field_name} must be a number")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{field_name} is not a number") from exc


def _float_or(value: object, default: float, field_name: str) -> float:
    num = _optional_float(value, field_name)
    return default if num is None else num


def _int_or(value: object, default: int, field_name: str) -> int:
    num = _optional_float(value, field_name)
    if num is None or math.isnan(num):
        return default
    return int(num)


def _optional_str(value: object) -> str | None:
    if value is None:
        return None
    return str(value)


@dataclass(frozen=True)
class PropertySet:
    """Material properties for one temperature regime (MPa, HB, GPa-ish modulus as catalogued)."""

    tensile_strength: float
    yield_strength: float | None = None
    shear_strength: float | None = None
    elongation: float | None = None
    hardness: float | None = None
    elastic_modulus: float | None = None
    strain_hardening_exponent: float | None = None
    anisotropy_ratio: float | None = None
    friction_coefficient: float | None = None
    surface_roughness: float | None = None
    reverse_factor: float | None = None
    grain_size: float | None = None
    minimum_bend_radius: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PropertySet":
        if not isinstance(data, Mapping):
            raise TypeError("property set must be a mapping")
        tensile = _optional_float(_pick(data, "tensile_strength", "tensileStrength"), "tensile_strength")
        if tensile is None:
            raise ValueError("tensile_strength is required")
        return cls(
            tensile_strength=tensile,
            yield_strength=_optional_float(_pick(data, "yield_strength", "yieldStrength"), "yield_strength"),
            shear_strength=_optional_float(_pick(data, "shear_strength", "shearStrength"), "shear_strength"),
            elongation=_optional_float(data.get("elongation"), "elongation"),
            hardness=_optional_float(data.get("hardness"), "hardness"),
            elastic_modulus=_optional_float(
                _pick(data, "elastic_modulus", "modulus", "elasticModulus"), "elastic_modulus"
            ),
            strain_hardening_exponent=_optional_float(
                _pick(data, "strain_hardening_exponent", "strainHardeningExponent"),
                "strain_hardening_exponent",
            ),
            anisotropy_ratio=_optional_float(
                _pick(data, "anisotropy_ratio", "anisotropyRatio"), "anisotropy_ratio"
            ),
            friction_coefficient=_optional_float(
                _pick(data, "friction_coefficient", "frictionCoefficient"), "friction_coefficient"
            ),
            surface_roughness=_optional_float(
                _pick(data, "surface_roughness", "surfaceRoughness"), "surface_roughness"
            ),
            reverse_factor=_optional_float(_pick(data, "reverse_factor", "reverseFactor"), "reverse_factor"),
            grain_size=_optional_float(_pick(data, "grain_size", "grainSize"), "grain_size"),
            minimum_bend_radius=_optional_str(_pick(data, "minimum_bend_radius", "minimumBendRadius")),
        )


@dataclass(frozen=True)
class FormingCharacteristics:
    recommended_die_clearance: str | None = None
    recommended_punch_speed: str | None = None
    blank_holding_force: str | None = None
    lubricant_type: str | None = None
    grain_direction_effect: str | None = None
    minimum_bend_radius: str | None = None
    max_forming_depth: str | None = None
    springback: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "FormingCharacteristics":
        data = data or {}
        return cls(
            recommended_die_clearance=_optional_str(
                _pick(data, "recommended_die_clearance", "recommendedDieClearance")
            ),
            recommended_punch_speed=_optional_str(
                _pick(data, "recommended_punch_speed", "recommendedPunchSpeed")
            ),
            blank_holding_force=_optional_str(_pick(data, "blank_holding_force", "blankHoldingForce")),
            lubricant_type=_optional_str(_pick(data, "lubricant_type", "lubricantType")),
            grain_direction_effect=_optional_str(
                _pick(data, "grain_direction_effect", "grainDirectionEffect")
            ),
            minimum_bend_radius=_optional_str(_pick(data, "minimum_bend_radius", "minimumBendRadius")),
            max_forming_depth=_optional_str(_pick(data, "max_forming_depth", "maxFormingDepth")),
            springback=_optional_str(data.get("springback")),
        )


@dataclass(frozen=True)
class Material:
    """Catalog entry. Read-only reference data shared by every calculation."""

    id: str
    name: str
    category: str
    properties: Mapping[str, PropertySet]
    forming_characteristics: FormingCharacteristics = field(default_factory=FormingCharacteristics)
    temperature_coefficient: float = DEFAULT_TEMPERATURE_COEFFICIENT

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], *, material_id: str | None = None) -> "Material":
        if not isinstance(data, Mapping):
            raise TypeError("material must be a mapping")
        mid = material_id if material_id is not None else data.get("id")
        if not mid:
            raise ValueError("material id is required")
        raw_props = data.get("properties")
        if not isinstance(raw_props, Mapping):
            raise ValueError(f"properties are required for material id={mid}")
        props = {
            regime: PropertySet.from_dict(raw_props[regime])
            for regime in REGIMES
            if raw_props.get(regime) is not None
        }
        if "room" not in props:
            raise ValueError(f"room properties are required for material id={mid}")
        return cls(
            id=str(mid),
            name=str(data.get("name") or mid),
            category=str(data.get("category") or ""),
            properties=props,
            forming_characteristics=FormingCharacteristics.from_dict(
                _pick(data, "forming_characteristics", "formingCharacteristics")
            ),
            temperature_coefficient=_float_or(
                _pick(data, "temperature_coefficient", "temperatureCoefficient"),
                DEFAULT_TEMPERATURE_COEFFICIENT,
                "temperature_coefficient",
            ),
        )

    def properties_for(self, regime: str) -> PropertySet:
        return self.properties.get(regime) or self.properties["room"]


@dataclass(frozen=True)
class SelectedMaterial:
    """
    The material state actually used by calculations: the catalog entry plus
    the active regime's strengths copied into flat fields.
    """

    material: Material
    regime: str
    tensile_strength: float
    yield_strength: float | None
    shear_strength: float | None
    reverse_factor: float

    @property
    def id(self) -> str:
        return self.material.id

    @property
    def name(self) -> str:
        return self.material.name

    @property
    def category(self) -> str:
        return self.material.category

    @property
    def properties(self) -> PropertySet:
        return self.material.properties_for(self.regime)

    @property
    def forming_characteristics(self) -> FormingCharacteristics:
        return self.material.forming_characteristics

    @property
    def temperature_coefficient(self) -> float:
        return self.material.temperature_coefficient

    def with_regime(self, regime: str) -> "SelectedMaterial":
        return select_material(self.material, regime)


def select_material(material: Material, regime: str = "room") -> SelectedMaterial:
    if regime not in REGIMES:
        raise ValueError(f"regime must be one of {REGIMES}")
    props = material.properties_for(regime)
    return SelectedMaterial(
        material=material,
        regime=regime,
        tensile_strength=props.tensile_strength,
        yield_strength=props.yield_strength,
        shear_strength=props.shear_strength,
        reverse_factor=DEFAULT_REVERSE_FACTOR if props.reverse_factor is None else props.reverse_factor,
    )


@dataclass(frozen=True)
class Parameters:
    thickness: float = 1.0
    temperature: float = 20.0
    batch_quantity: int = 1
    is_metric: bool = True

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "Parameters":
        data = data or {}
        is_metric = data.get("is_metric", data.get("isMetric", True))
        return cls(
            thickness=_float_or(data.get("thickness"), 1.0, "thickness"),
            temperature=_float_or(data.get("temperature"), 20.0, "temperature"),
            batch_quantity=_int_or(
                _pick(data, "batch_quantity", "batchQuantity", "quantity"), 1, "batch_quantity"
            ),
            is_metric=bool(is_metric),
        )

    @property
    def temperature_celsius(self) -> float:
        return self.temperature if self.is_metric else fahrenheit_to_celsius(self.temperature)

    @property
    def regime(self) -> str:
        return regime_of(self.temperature_celsius)

    @property
    def thickness_mm(self) -> float:
        return self.to_mm(self.thickness)

    @property
    def effective_batch_quantity(self) -> int:
        return self.batch_quantity if self.batch_quantity and self.batch_quantity > 0 else 1

    def to_mm(self, length: float) -> float:
        """Converts a length entered in this unit system to millimetres."""
        return length if self.is_metric else inch_to_mm(length)

    def toggle_units(self) -> "Parameters":
        if self.is_metric:
            thickness = round(self.thickness / MM_PER_INCH * 1000) / 1000
            temperature = float(round(self.temperature * 9 / 5 + 32))
        else:
            thickness = round(self.thickness * MM_PER_INCH * 100) / 100
            temperature = float(round((self.temperature - 32) * 5 / 9))
        return replace(self, thickness=thickness, temperature=temperature, is_metric=not self.is_metric)

    def to_dict(self) -> dict[str, Any]:
        return {
            "thickness": self.thickness,
            "temperature": self.temperature,
            "batch_quantity": self.batch_quantity,
            "is_metric": self.is_metric,
        }


@dataclass(frozen=True)
class PerimeterOp:
    enabled: bool = False
    length: float = 0.0


@dataclass(frozen=True)
class HoleItem:
    diameter: float = 10.0
    quantity: int = 1
    shape: str = "circular"
    width: float | None = None
    id: str = field(default_factory=_uuid)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "HoleItem":
        return cls(
            diameter=_float_or(data.get("diameter"), 10.0, "diameter"),
            quantity=_int_or(data.get("quantity"), 1, "quantity"),
            shape=str(data.get("shape") or "circular"),
            width=_optional_float(data.get("width"), "width"),
            id=str(data.get("id") or _uuid()),
        )


@dataclass(frozen=True)
class BendItem:
    length: float = 100.0
    angle: float = 90.0
    radius_to_thickness: float = 1.0
    type: str = "v-bend"
    forming_type: str = "standard"
    id: str = field(default_factory=_uuid)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BendItem":
        return cls(
            length=_float_or(data.get("length"), 100.0, "length"),
            angle=_float_or(data.get("angle"), 90.0, "angle"),
            radius_to_thickness=_float_or(
                _pick(data, "radius_to_thickness", "radiusToThickness"), 1.0, "radius_to_thickness"
            ),
            type=str(data.get("type") or "v-bend"),
            forming_type=str(_pick(data, "forming_type", "formingType") or "standard"),
            id=str(data.get("id") or _uuid()),
        )


@dataclass(frozen=True)
class FormItem:
    type: str = "emboss"
    diameter: float = 20.0
    depth: float = 2.0
    quantity: int = 1
    id: str = field(default_factory=_uuid)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FormItem":
        return cls(
            type=str(data.get("type") or "emboss"),
            diameter=_float_or(data.get("diameter"), 20.0, "diameter"),
            depth=_float_or(data.get("depth"), 2.0, "depth"),
            quantity=_int_or(data.get("quantity"), 1, "quantity"),
            id=str(data.get("id") or _uuid()),
        )


@dataclass(frozen=True)
class DrawItem:
    type: str = "round"
    diameter: float = 50.0
    depth: float = 20.0
    corner_radius: float = 5.0
    quantity: int = 1
    id: str = field(default_factory=_uuid)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DrawItem":
        return cls(
            type=str(data.get("type") or "round"),
            diameter=_float_or(data.get("diameter"), 50.0, "diameter"),
            depth=_float_or(data.get("depth"), 20.0, "depth"),
            corner_radius=_float_or(_pick(data, "corner_radius", "cornerRadius"), 5.0, "corner_radius"),
            quantity=_int_or(data.get("quantity"), 1, "quantity"),
            id=str(data.get("id") or _uuid()),
        )


ITEM_TYPES = {
    "holes": HoleItem,
    "bends": BendItem,
    "forms": FormItem,
    "draws": DrawItem,
}


@dataclass(frozen=True)
class ItemGroup:
    enabled: bool = False
    items: tuple = ()


def _require_category(category: str, allowed: tuple[str, ...] = CATEGORIES) -> None:
    if category not in allowed:
        raise ValueError(f"category must be one of {allowed}, got {category!r}")


@dataclass(frozen=True)
class OperationSet:
    perimeter: PerimeterOp = field(default_factory=PerimeterOp)
    holes: ItemGroup = field(default_factory=ItemGroup)
    bends: ItemGroup = field(default_factory=ItemGroup)
    forms: ItemGroup = field(default_factory=ItemGroup)
    draws: ItemGroup = field(default_factory=ItemGroup)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "OperationSet":
        data = data or {}
        perimeter = data.get("perimeter") or {}
        groups: dict[str, ItemGroup] = {}
        for category in ITEM_CATEGORIES:
            raw = data.get(category) or {}
            item_cls = ITEM_TYPES[category]
            groups[category] = ItemGroup(
                enabled=bool(raw.get("enabled", False)),
                items=tuple(item_cls.from_dict(item) for item in raw.get("items") or ()),
            )
        return cls(
            perimeter=PerimeterOp(
                enabled=bool(perimeter.get("enabled", False)),
                length=_float_or(perimeter.get("length"), 0.0, "perimeter.length"),
            ),
            **groups,
        )

    def is_enabled(self, category: str) -> bool:
        _require_category(category)
        return bool(getattr(self, category).enabled)

    def enabled_categories(self) -> tuple[str, ...]:
        return tuple(c for c in CATEGORIES if self.is_enabled(c))

    def dependencies(self) -> dict[str, bool]:
        return {c: self.is_enabled(c) for c in CATEGORIES}

    def items(self, category: str) -> tuple:
        _require_category(category, ITEM_CATEGORIES)
        return getattr(self, category).items

    def toggle(self, category: str) -> "OperationSet":
        _require_category(category)
        current = getattr(self, category)
        return replace(self, **{category: replace(current, enabled=not current.enabled)})

    def set_perimeter_length(self, length: float) -> "OperationSet":
        return replace(self, perimeter=replace(self.perimeter, length=float(length)))

    def add_item(self, category: str, item: Any = None) -> "OperationSet":
        _require_category(category, ITEM_CATEGORIES)
        item_cls = ITEM_TYPES[category]
        if item is None:
            item = item_cls()
        elif isinstance(item, Mapping):
            item = item_cls.from_dict(item)
        elif not isinstance(item, item_cls):
            raise TypeError(f"{category} items must be {item_cls.__name__}")
        group = getattr(self, category)
        return replace(self, **{category: replace(group, items=group.items + (item,))})

    def update_item(self, category: str, item_id: str, **changes: Any) -> "OperationSet":
        _require_category(category, ITEM_CATEGORIES)
        group = getattr(self, category)
        items = tuple(replace(it, **changes) if it.id == item_id else it for it in group.items)
        return replace(self, **{category: replace(group, items=items)})

    def remove_item(self, category: str, item_id: str) -> "OperationSet":
        _require_category(category, ITEM_CATEGORIES)
        group = getattr(self, category)
        items = tuple(it for it in group.items if it.id != item_id)
        return replace(self, **{category: replace(group, items=items)})

    def replace_items(self, category: str, items) -> "OperationSet":
        _require_category(category, ITEM_CATEGORIES)
        item_cls = ITEM_TYPES[category]
        built = tuple(it if isinstance(it, item_cls) else item_cls.from_dict(it) for it in items)
        group = getattr(self, category)
        return replace(self, **{category: replace(group, items=built)})

    def scaled_lengths(self, factor: float) -> "OperationSet":
        """Multiplies every length field by factor (unit-system switch)."""

        def _scale(value: float | None) -> float | None:
            return None if value is None else value * factor

        holes = tuple(replace(h, diameter=h.diameter * factor, width=_scale(h.width)) for h in self.holes.items)
        bends = tuple(replace(b, length=b.length * factor) for b in self.bends.items)
        forms = tuple(replace(f, diameter=f.diameter * factor, depth=f.depth * factor) for f in self.forms.items)
        draws = tuple(
            replace(d, diameter=d.diameter * factor, depth=d.depth * factor, corner_radius=d.corner_radius * factor)
            for d in self.draws.items
        )
        return replace(
            self,
            perimeter=replace(self.perimeter, length=self.perimeter.length * factor),
            holes=replace(self.holes, items=holes),
            bends=replace(self.bends, items=bends),
            forms=replace(self.forms, items=forms),
            draws=replace(self.draws, items=draws),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"perimeter": asdict(self.perimeter)}
        for category in ITEM_CATEGORIES:
            group = getattr(self, category)
            out[category] = {
                "enabled": group.enabled,
                "items": [asdict(it) for it in group.items],
            }
        return out


@dataclass(frozen=True)
class Snapshot:
    """Everything one calculation needs, passed by value."""

    material: SelectedMaterial | None
    parameters: Parameters = field(default_factory=Parameters)
    operations: OperationSet = field(default_factory=OperationSet)

    @classmethod
    def from_dict(
        cls,
        data: Mapping[str, Any],
        catalog: Mapping[str, Material] | None = None,
    ) -> "Snapshot":
        parameters = Parameters.from_dict(data.get("parameters"))
        raw_material = data.get("material")
        material: Material | None
        if raw_material is None:
            material = None
        elif isinstance(raw_material, str):
            if catalog is None or raw_material not in catalog:
                raise ValueError(f"Material not found: {raw_material}")
            material = catalog[raw_material]
        elif isinstance(raw_material, Mapping) and "properties" not in raw_material:
            mid = raw_material.get("id")
            if catalog is None or mid not in catalog:
                raise ValueError(f"Material not found: {mid}")
            material = catalog[mid]
        else:
            material = Material.from_dict(raw_material)
        return cls(
            material=select_material(material, parameters.regime) if material is not None else None,
            parameters=parameters,
            operations=OperationSet.from_dict(data.get("operations")),
        )

    def with_parameters(self, **changes: Any) -> "Snapshot":
        """Returns a snapshot whose material regime follows the new temperature."""
        parameters = replace(self.parameters, **changes)
        return replace(self, parameters=parameters, material=self._aligned(self.material, parameters))

    def with_material(self, material: Material | None) -> "Snapshot":
        selected = select_material(material, self.parameters.regime) if material is not None else None
        return replace(self, material=selected)

    def with_operations(self, operations: OperationSet) -> "Snapshot":
        return replace(self, operations=operations)

    def toggle_units(self) -> "Snapshot":
        parameters = self.parameters.toggle_units()
        factor = 1.0 / MM_PER_INCH if self.parameters.is_metric else MM_PER_INCH
        return replace(
            self,
            parameters=parameters,
            operations=self.operations.scaled_lengths(factor),
            material=self._aligned(self.material, parameters),
        )

    @staticmethod
    def _aligned(material: SelectedMaterial | None, parameters: Parameters) -> SelectedMaterial | None:
        if material is None or material.regime == parameters.regime:
            return material
        return material.with_regime(parameters.regime)
