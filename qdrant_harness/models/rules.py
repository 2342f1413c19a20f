"""
Version rule models used to skip tests on unsupported Qdrant versions.
"""

import operator
from enum import Enum
from typing import Any, Optional

from packaging.version import InvalidVersion, Version
from pydantic import BaseModel, ConfigDict, field_validator

from ..errors import ConfigurationError


class Comparator(Enum):
    """Version comparison operators"""
    EQ = "=="
    NE = "!="
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="


COMPARATOR_ALIASES = {
    "=": Comparator.EQ,
    "eq": Comparator.EQ,
    "<>": Comparator.NE,
    "ne": Comparator.NE,
    "lt": Comparator.LT,
    "le": Comparator.LE,
    "gt": Comparator.GT,
    "ge": Comparator.GE,
}

_OPERATORS = {
    Comparator.EQ: operator.eq,
    Comparator.NE: operator.ne,
    Comparator.LT: operator.lt,
    Comparator.LE: operator.le,
    Comparator.GT: operator.gt,
    Comparator.GE: operator.ge,
}


def parse_version(value: str) -> Version:
    """Parse a version string, tolerating a leading 'v'"""
    try:
        return Version(value.strip().lstrip('vV'))
    except InvalidVersion as e:
        raise ConfigurationError(f"Invalid version string: {value!r}") from e


class VersionRule(BaseModel):
    """A (version, comparator, optional test name) skip rule"""
    model_config = ConfigDict(frozen=True)

    version: str
    comparator: Comparator
    test_name: Optional[str] = None

    @field_validator('version')
    @classmethod
    def validate_version(cls, v: str) -> str:
        parse_version(v)
        return v

    @field_validator('comparator', mode='before')
    @classmethod
    def normalize_comparator(cls, v: Any) -> Any:
        if isinstance(v, str):
            key = v.strip().lower()
            if key in COMPARATOR_ALIASES:
                return COMPARATOR_ALIASES[key]
            return key
        return v

    @property
    def is_scoped(self) -> bool:
        return self.test_name is not None

    def matches(self, current_version: str) -> bool:
        """Check ``current_version <comparator> self.version``"""
        compare = _OPERATORS[self.comparator]
        return compare(parse_version(current_version), parse_version(self.version))

    @classmethod
    def from_value(cls, value: Any) -> 'VersionRule':
        """Create a rule from a tuple/list, a dict, or an existing rule"""
        if isinstance(value, cls):
            return value
        try:
            if isinstance(value, dict):
                return cls(**value)
            if isinstance(value, (list, tuple)) and 2 <= len(value) <= 3:
                fields = dict(zip(('version', 'comparator', 'test_name'), value))
                return cls(**fields)
        except ValueError as e:
            raise ConfigurationError(f"Invalid version rule {value!r}: {e}") from e
        raise ConfigurationError(
            f"Invalid version rule {value!r}: expected (version, comparator[, test_name])"
        )
