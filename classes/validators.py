import bleach
import pydantic
from flask import request

from utils.errors import ValidationError

ALLOWED_TAGS = ["b", "i", "u", "strong", "em", "p", "br", "ul", "ol", "li", "a", "blockquote", "h1", "h2", "h3"]


def _format_error(error):
    field = ".".join(str(part) for part in error.get("loc", ()))
    message = error.get("msg", "Invalid value")
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    return {"field": field or None, "message": message}


def validate_payload(schema, data=None):
    """Parse the JSON body (or `data`) into `schema`, raising ValidationError."""
    if data is None:
        data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")

    try:
        return schema.model_validate(data)
    except pydantic.ValidationError as exc:
        errors = [_format_error(error) for error in exc.errors()]
        first = errors[0]
        message = f"{first['field']}: {first['message']}" if first["field"] else first["message"]
        raise ValidationError(message, errors=errors)


def clean_html(value):
    """Strip markup outside the formatting allow-list."""
    if value is None:
        return None
    return bleach.clean(value, tags=ALLOWED_TAGS, strip=True)


def parse_int_arg(name):
    """Optional integer query-string argument."""
    value = request.args.get(name)
    if value in (None, ""):
        return None
    try:
        return int(value)
    except ValueError:
        raise ValidationError(f"{name} must be an integer")
