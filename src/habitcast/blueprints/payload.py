"""Request payload parsing shared by the blueprints."""

from __future__ import annotations

from typing import Any, TypeVar

from flask import request
from pydantic import BaseModel, ValidationError

from ..errors import FormValidationError

FormT = TypeVar("FormT", bound=BaseModel)


def request_payload() -> dict[str, Any]:
    """JSON body when present, otherwise form fields."""

    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def validation_errors(exc: ValidationError) -> dict[str, list[str]]:
    """Group pydantic errors by their top-level field."""

    structured: dict[str, list[str]] = {}
    for error in exc.errors(include_url=False):
        loc = error.get("loc", ())
        key = str(loc[0]) if loc else "__root__"
        structured.setdefault(key, []).append(error.get("msg", "Invalid value"))
    return structured


def load_form(form_cls: type[FormT], data: dict[str, Any] | None = None) -> FormT:
    """Validate the request payload, raising `FormValidationError` on bad input."""

    try:
        return form_cls.model_validate(request_payload() if data is None else data)
    except ValidationError as exc:
        raise FormValidationError(validation_errors(exc)) from exc
