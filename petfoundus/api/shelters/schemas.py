# petfoundus/api/shelters/schemas.py
from marshmallow import Schema, fields, validate


class LocationSchema(Schema):
    address = fields.Str(allow_none=True)
    city = fields.Str(allow_none=True)
    state = fields.Str(allow_none=True)


class ShelterUpdateSchema(Schema):
    """PUT /api/shelters/<shelter_id> 부분 업데이트 스키마."""
    name = fields.Str(validate=validate.Length(min=2, max=100))
    phone = fields.Str(allow_none=True, validate=validate.Length(max=20))
    location = fields.Nested(LocationSchema)


class ShelterResponseSchema(Schema):
    shelter_id = fields.Str(dump_only=True)
    name = fields.Str()
    email = fields.Str()
    phone = fields.Str(allow_none=True)
    location = fields.Dict()


class ShelterStatsSchema(Schema):
    total_pets = fields.Int()
    available_pets = fields.Int()
    adopted_pets = fields.Int()
    pending_requests = fields.Int()
