"""Generic hydration of API models from nested JSON objects."""

from typing import Any, ClassVar, Collection, Dict, FrozenSet, Optional, Type, TypeVar
from pydantic import BaseModel, ConfigDict

from figo.config.logging import get_logger

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound="FigoModel")


def flatten(
    data: Optional[Dict[str, Any]],
    excluded_keys: Collection[str] = (),
    nested_fields: Collection[str] = (),
    parent: Optional[str] = None,
) -> Dict[str, Any]:
    """Flatten a nested JSON object into prefixed field names.

    A nested object under ``key`` is flattened with the prefix ``key_``. Only
    the immediate parent key is used as prefix, so ``{"provider": {"icon":
    {"url": ...}}}`` yields ``icon_url``. Names listed in ``nested_fields``
    keep their mapping value, excluded keys are dropped at every level.

    Args:
        data: JSON object as returned by the API
        excluded_keys: Keys which are skipped
        nested_fields: Flattened names whose mapping value is kept as is
        parent: Key of the enclosing object

    Returns:
        Flat mapping of field names to values
    """
    flat: Dict[str, Any] = {}
    if not data:
        return flat

    for key, value in data.items():
        if key in excluded_keys:
            continue

        name = f"{parent}_{key}" if parent else key
        if isinstance(value, dict) and name not in nested_fields:
            flat.update(flatten(value, excluded_keys, nested_fields, parent=key))
        else:
            flat[name] = value

    return flat


class FigoModel(BaseModel):
    """Base class for flat models populated from API responses."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    excluded_keys: ClassVar[FrozenSet[str]] = frozenset()
    nested_fields: ClassVar[FrozenSet[str]] = frozenset()

    @classmethod
    def from_dict(cls: Type[ModelT], data: Optional[Dict[str, Any]]) -> ModelT:
        """Create a model from a (nested) JSON object."""
        values = flatten(data, cls.excluded_keys, cls.nested_fields)

        unknown = set(values) - set(cls.model_fields)
        if unknown:
            logger.debug(f"Ignoring unknown {cls.__name__} fields: {sorted(unknown)}")

        return cls(**{name: value for name, value in values.items() if name in cls.model_fields})

    def to_dict(self) -> Dict[str, Any]:
        """Convert the model back to a flat mapping.

        Only fields loaded from the server or assigned by the caller are included.
        """
        return self.model_dump(mode="json", exclude_unset=True)
