"""Exercise schemas and numeric coercion helpers."""

import math
import re
from datetime import datetime
from typing import Optional, List, Union
from pydantic import BaseModel

Number = Union[int, float, str]

_INT_PREFIX = re.compile(r"^\s*[+-]?\d+")
_FLOAT_PREFIX = re.compile(r"^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")

# Column limits: sets/reps are INTEGER, weight is NUMERIC(10, 2)
INT_LIMIT = 2 ** 31 - 1
WEIGHT_LIMIT = 10 ** 8


def _check_int(value: int) -> int:
    if abs(value) > INT_LIMIT:
        raise ValueError(f"out of range: {value!r}")
    return value


def to_int(value: Number) -> int:
    """
    Coerce a form value to an integer the way browsers parse number inputs:
    floats are truncated and strings are read up to the first non-digit.

    Raises ValueError when no leading integer can be read, or when the value
    is infinite, NaN or does not fit an INTEGER column.
    """
    if isinstance(value, bool):
        raise ValueError(f"not a number: {value!r}")
    if isinstance(value, int):
        return _check_int(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"not a finite number: {value!r}")
        return _check_int(int(value))
    match = _INT_PREFIX.match(str(value))
    if not match:
        raise ValueError(f"not a number: {value!r}")
    return _check_int(int(match.group(0)))


def to_float(value: Number) -> float:
    """Coerce a form value to a finite float, reading the leading numeric part of strings."""
    if isinstance(value, bool):
        raise ValueError(f"not a number: {value!r}")
    if isinstance(value, (int, float)):
        try:
            result = float(value)
        except OverflowError:
            raise ValueError(f"out of range: {value!r}")
    else:
        match = _FLOAT_PREFIX.match(str(value))
        if not match:
            raise ValueError(f"not a number: {value!r}")
        result = float(match.group(0))
    if not math.isfinite(result) or abs(result) >= WEIGHT_LIMIT:
        raise ValueError(f"out of range: {value!r}")
    return result


class ExerciseFields(BaseModel):
    """Fields an exercise body may carry; every one is optional on the wire."""
    exercise_name: Optional[str] = None
    sets: Optional[Number] = None
    reps: Optional[Number] = None
    weight: Optional[Number] = None


class ExerciseCreate(ExerciseFields):
    """Schema for logging an exercise against a workout."""

    def missing_fields(self) -> List[str]:
        """Name, sets and reps must be truthy; weight only has to be present (0 is valid)."""
        missing = [
            field for field in ("exercise_name", "sets", "reps")
            if not getattr(self, field)
        ]
        if self.weight is None or self.weight == "":
            missing.append("weight")
        return missing


class ExerciseUpdate(ExerciseFields):
    """Schema for updating an exercise; only the fields sent are written."""
    pass


class ExerciseResponse(BaseModel):
    """Schema for a single exercise row."""
    id: str
    workout_id: str
    user_id: str
    exercise_name: str
    sets: int
    reps: int
    weight: float
    created_at: datetime

    class Config:
        from_attributes = True


class ExerciseListResponse(BaseModel):
    exercises: List[ExerciseResponse]


class ExerciseEnvelope(BaseModel):
    exercise: ExerciseResponse
