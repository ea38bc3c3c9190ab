# petfoundus/api/pet_updates/schemas.py
from marshmallow import Schema, fields, validate

from petfoundus.models.pet_update import PetCondition


class PetUpdateCreateSchema(Schema):
    """POST /api/pet-updates 폼 필드. 사진은 'images' 파일 필드로 여러 장 전송."""
    pet_id = fields.Str(required=True, validate=validate.Length(min=1))
    shelter_id = fields.Str(required=True, validate=validate.Length(min=1))
    notes = fields.Str(required=True, validate=validate.Length(min=1, max=2000))
    weight = fields.Str(allow_none=True, validate=validate.Length(max=20))
    condition = fields.Str(allow_none=True, validate=validate.OneOf([e.value for e in PetCondition]))


class PetUpdateResponseSchema(Schema):
    update_id = fields.Str()
    pet_id = fields.Str()
    adopter_id = fields.Str()
    shelter_id = fields.Str()
    notes = fields.Str()
    weight = fields.Str(allow_none=True)
    condition = fields.Str(allow_none=True)
    images = fields.List(fields.Str())
    created_at = fields.DateTime()
