"""Base form for JSON request bodies."""

from __future__ import annotations

from typing import Any

from flask import request
from flask_wtf import FlaskForm
from werkzeug.datastructures import ImmutableMultiDict

from arenaclash.errors import ValidationError


def _json_formdata(form: Any, payload: Any) -> ImmutableMultiDict:
    """Flatten a JSON object into form data for the form's own fields.

    ``null`` counts as not submitted. Numbers are passed on as text, anything
    else (lists, objects, booleans) is rejected.
    """
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object.")

    formdata = {}
    for key, value in payload.items():
        if value is None or key not in form:
            continue
        if isinstance(value, bool) or not isinstance(value, (str, int, float)):
            label = form[key].label.text
            raise ValidationError(f"{label}: Must be text or a number.")
        formdata[key] = value if isinstance(value, str) else str(value)
    return ImmutableMultiDict(formdata)


class JSONForm(FlaskForm):
    """A FlaskForm that reads JSON bodies.

    CSRF is enforced globally by CSRFProtect through the X-CSRFToken header,
    so the per-form token field is disabled.
    """

    class Meta:
        csrf = False

        def wrap_formdata(self, form, formdata):
            if request.is_json and request.method != "GET":
                return _json_formdata(form, request.get_json(silent=True))
            return super().wrap_formdata(form, formdata)

    def validate_or_raise(self) -> None:
        """Validate the submitted data, raising ValidationError on failure."""
        if self.validate_on_submit():
            return
        for field_name, errors in self.errors.items():
            if errors:
                label = getattr(self, field_name).label.text
                raise ValidationError(f"{label}: {errors[0]}")
        raise ValidationError("Invalid request.")
