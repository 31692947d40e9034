"""
Workout template as stored by the workouts API.

Templates are authored elsewhere; the logger only reads them to build
prefills. Their default weights follow the template-authoring rules
(0-999.99, two decimal places), which are stricter than session logging.
"""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from domain.services.set_validator import TEMPLATE_SET_RULES


class TemplateExercise(BaseModel):
    """An exercise prescribed by a template."""

    exercise_id: str = Field(..., min_length=1)
    exercise_name: str = Field(default="")
    sets: int = Field(..., ge=1, le=99, description="Prescribed number of sets")
    reps: int = Field(..., ge=1, le=99, description="Prescribed reps per set")
    default_weight: Optional[float] = Field(
        default=None, description="Default weight, if the template sets one"
    )
    position: int = Field(..., ge=0)

    @field_validator("default_weight")
    @classmethod
    def validate_default_weight(cls, v: Optional[float]) -> Optional[float]:
        if v is None:
            return v
        error = TEMPLATE_SET_RULES.check_weight(v)
        if error:
            raise ValueError(error)
        return v


class WorkoutTemplate(BaseModel):
    """A named, ordered list of prescribed exercises."""

    id: str = Field(..., min_length=1)
    user_id: Optional[str] = None
    name: str = Field(..., min_length=1, max_length=60)
    exercises: List[TemplateExercise] = Field(..., min_length=1, max_length=50)

    @field_validator("exercises")
    @classmethod
    def validate_positions(cls, v: List[TemplateExercise]) -> List[TemplateExercise]:
        positions = [e.position for e in v]
        if len(positions) != len(set(positions)):
            raise ValueError("Exercise positions must be unique within template")
        return sorted(v, key=lambda e: e.position)
