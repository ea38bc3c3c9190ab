# petfoundus/api/ai/schemas.py
from marshmallow import Schema, fields, validate

from petfoundus.models.pet import Species


class LabelSuggestionRequestSchema(Schema):
    """POST /api/ai/suggest-labels 요청 스키마."""
    description = fields.Str(required=True, validate=validate.Length(min=20, max=2000),
                             error_messages={"required": "Please provide a description of at least 20 characters."})
    species = fields.Str(required=True, validate=validate.OneOf([e.value for e in Species]))
    breed = fields.Str(allow_none=True)
    name = fields.Str(allow_none=True)


class ChatRequestSchema(Schema):
    """POST /api/chat 요청 스키마."""
    message = fields.Str(required=True, validate=validate.Length(min=1, max=2000))
    session_id = fields.Str(allow_none=True, validate=validate.Length(max=100))
