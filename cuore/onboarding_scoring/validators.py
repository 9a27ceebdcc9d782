"""Per-module validation of raw questionnaire payloads.

The pydantic models in ``schemas`` do the checking; this layer turns the first
``ValidationError`` entry into a ``DomainError(message, field)`` and hands
back the frozen domain values the scorers consume. Nothing is coerced
silently: an unknown category is an error, not a default.
"""

from typing import Any, Callable, Dict, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from .domain import (
    BasicInfo,
    BiomarkerInput,
    ExerciseDiet,
    Lifestyle,
    RiskHistory,
    SleepStress,
)
from .errors import DomainError
from .schemas import (
    BIOMARKER_FIELDS,
    MAX_AGE,
    MAX_HEIGHT,
    MAX_WAIST,
    MAX_WEIGHT,
    MIN_AGE,
    MIN_HEIGHT,
    MIN_WAIST,
    MIN_WEIGHT,
    BasicInfoIn,
    BiomarkerPanelIn,
    ExerciseDietIn,
    LifestyleIn,
    RiskHistoryIn,
    SleepStressIn,
)
from .tables import DEFAULT_TABLES, ScoringTables

ModelT = TypeVar("ModelT", bound=BaseModel)

FIELD_LABELS = {
    "age": "Age",
    "height_cm": "Height",
    "weight_kg": "Weight",
    "waist_cm": "Waist",
}

RANGE_MESSAGES = {
    "age": f"Age must be between {MIN_AGE} and {MAX_AGE}",
    "height_cm": f"Height must be between {MIN_HEIGHT} and {MAX_HEIGHT} cm",
    "weight_kg": f"Weight must be between {MIN_WEIGHT} and {MAX_WEIGHT}",
    "waist_cm": f"Waist must be between {MIN_WAIST} and {MAX_WAIST} cm",
    "o2_sat": "o2_sat must be between 0 and 100",
}

CHOICE_MESSAGES = {
    "gender": "Invalid gender. Must be 'male', 'female', or 'other'",
    "hscrp_unit": "Invalid value for hscrp_unit. Must be 'mg/dl' or 'mg/l'",
}

NUMBER_ERRORS = {"float_type", "float_parsing", "finite_number", "int_type", "int_parsing", "int_from_float"}
RANGE_ERRORS = {"greater_than", "greater_than_equal", "less_than", "less_than_equal"}
OBJECT_ERRORS = {"model_type", "model_attributes_type", "dict_type"}


def _error_field(module: str, error: Dict[str, Any]) -> str:
    context = error.get("ctx") or {}
    if context.get("field"):
        return context["field"]
    # List positions sit after the field name in the location
    for part in reversed(error.get("loc") or ()):
        if isinstance(part, str):
            return part
    return module


def to_domain_error(module: str, exc: ValidationError) -> DomainError:
    """First validation failure as a DomainError carrying the offending field."""
    error = exc.errors()[0]
    kind = error["type"]
    field = _error_field(module, error)

    if kind == "missing":
        message = f"Missing required field: {field}"
    elif kind in OBJECT_ERRORS:
        message = f"{module} must be an object"
    elif kind == "literal_error":
        message = CHOICE_MESSAGES.get(field, f"Invalid value for {field}: {error.get('input')}")
    elif kind in NUMBER_ERRORS:
        message = f"{FIELD_LABELS.get(field, field)} must be a number"
    elif kind in RANGE_ERRORS and field in RANGE_MESSAGES:
        message = RANGE_MESSAGES[field]
    elif kind == "greater_than":
        message = f"{field} must be greater than {error['ctx']['gt']}"
    else:
        message = error["msg"]
    return DomainError(message, field)


def _parse(model: Type[ModelT], module: str, raw: Any) -> ModelT:
    try:
        return model.model_validate(raw)
    except ValidationError as e:
        raise to_domain_error(module, e) from None


def validate_basic_info(raw: Any, tables: ScoringTables = DEFAULT_TABLES) -> BasicInfo:
    return BasicInfo(**_parse(BasicInfoIn, "m2", raw).model_dump())


def validate_risk_history(raw: Any, tables: ScoringTables = DEFAULT_TABLES) -> RiskHistory:
    answers = _parse(RiskHistoryIn, "m3", raw)
    selected = set(answers.selected_options)
    flags = {key: text in selected for key, text, _ in tables.risk_history_options}
    return RiskHistory(other_conditions=answers.other_conditions, **flags)


def validate_lifestyle(raw: Any, tables: ScoringTables = DEFAULT_TABLES) -> Lifestyle:
    return Lifestyle(**_parse(LifestyleIn, "m4", raw).model_dump())


def validate_exercise_diet(raw: Any, tables: ScoringTables = DEFAULT_TABLES) -> ExerciseDiet:
    return ExerciseDiet(**_parse(ExerciseDietIn, "m5", raw).model_dump())


def validate_sleep_stress(raw: Any, tables: ScoringTables = DEFAULT_TABLES) -> SleepStress:
    return SleepStress(**_parse(SleepStressIn, "m6", raw).model_dump())


def is_empty_biomarker_payload(raw: Any) -> bool:
    """True when no biomarker value at all was supplied (imputation path)."""
    if raw is None:
        return True
    if not isinstance(raw, Mapping):
        return False
    return all(raw.get(field) is None for field in BIOMARKER_FIELDS + ("A1C",))


def validate_biomarkers(raw: Any, tables: ScoringTables = DEFAULT_TABLES) -> Optional[BiomarkerInput]:
    """Return None for an empty panel, otherwise a complete panel."""
    if is_empty_biomarker_payload(raw):
        return None
    return BiomarkerInput(**_parse(BiomarkerPanelIn, "m7", raw).model_dump())


VALIDATORS: Dict[str, Callable[..., Any]] = {
    "m2": validate_basic_info,
    "m3": validate_risk_history,
    "m4": validate_lifestyle,
    "m5": validate_exercise_diet,
    "m6": validate_sleep_stress,
    "m7": validate_biomarkers,
}


def validate(module_name: str, raw_fields: Any, tables: ScoringTables = DEFAULT_TABLES):
    """Validate one module's raw fields; raises DomainError on the first violation."""
    validator = VALIDATORS.get(module_name)
    if validator is None:
        raise DomainError(f"Unknown module: {module_name}", module_name)
    return validator(raw_fields, tables)
