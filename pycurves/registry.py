"""
Curve type registry.

Maps the ``"type"`` tag of exported fields to the class able to rebuild it,
so that an external serializer can restore a curve without knowing its
concrete type.
"""

from typing import Any, Dict, List, Optional, Type

from pycurves.exceptions import SerializationError
from pycurves.logging import LOG_DEBUG
from pycurves.serialization import Serializable


CURVE_TYPES: Dict[str, Type[Serializable]] = {}


def register_curve_type(name: str, curve_class: Type[Serializable]) -> Type[Serializable]:
    """Register a serializable type under its tag.

    Args:
        name: The tag written by ``to_dict`` (e.g., "polynomial").
        curve_class: The class to register.

    Returns:
        The registered class, so this can be used as a decorator helper.
    """
    if name in CURVE_TYPES and CURVE_TYPES[name] is not curve_class:
        LOG_DEBUG(f"Replacing curve type '{name}': {CURVE_TYPES[name].__name__} -> {curve_class.__name__}")
    CURVE_TYPES[name] = curve_class
    return curve_class


def get_curve_class(name: str) -> Optional[Type[Serializable]]:
    """Get the class registered for a tag, or None if not found."""
    return CURVE_TYPES.get(name)


def list_curve_types() -> List[str]:
    return list(CURVE_TYPES.keys())


def curve_from_dict(data: Dict[str, Any], version: Optional[int] = None) -> Serializable:
    """Rebuild any registered entity from its exported fields.

    Raises:
        SerializationError: If the tag is missing or unknown.
    """
    if not isinstance(data, dict) or "type" not in data:
        raise SerializationError("exported fields carry no type tag")
    curve_class = get_curve_class(data["type"])
    if curve_class is None:
        raise SerializationError(
            "unknown curve type", type=data["type"], available=list_curve_types()
        )
    return curve_class.from_dict(data, version=version)


def _register_builtin_types() -> None:
    from pycurves.linear_variable import LinearVariable
    from pycurves.polynomial import Polynomial

    register_curve_type(Polynomial.serialization_tag, Polynomial)
    register_curve_type(LinearVariable.serialization_tag, LinearVariable)


_register_builtin_types()
