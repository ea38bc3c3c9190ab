# petfoundus/api/adoption_requests/schemas.py
from marshmallow import Schema, fields, validate


class AdoptionRequestCreateSchema(Schema):
    """POST /api/adopters/<adopter_id>/request 요청 스키마."""
    pet_id = fields.Str(required=True, validate=validate.Length(min=1),
                        error_messages={"required": "pet_id is required."})


class ShelterDecisionSchema(Schema):
    """승인/거절 시 입양자에게 전달할 선택 메시지."""
    message = fields.Str(allow_none=True, validate=validate.Length(max=1000))


class ShelterResponseSchema(Schema):
    message = fields.Str(allow_none=True)
    responded_at = fields.DateTime(allow_none=True)


class PetSummarySchema(Schema):
    pet_id = fields.Str()
    name = fields.Str()
    species = fields.Str()
    breed = fields.Str(allow_none=True)
    images = fields.List(fields.Dict())
    adoption_status = fields.Str()


class AdoptionRequestResponseSchema(Schema):
    request_id = fields.Str()
    adopter_id = fields.Str()
    pet_id = fields.Str()
    shelter_id = fields.Str()
    status = fields.Str()
    request_date = fields.DateTime()
    shelter_response = fields.Nested(ShelterResponseSchema, allow_none=True)
    pet = fields.Nested(PetSummarySchema, allow_none=True)


class ShelterRequestRowSchema(Schema):
    """보호소 대시보드용 평탄화된 요청 행."""
    request_id = fields.Str()
    adopter_id = fields.Str()
    adopter_name = fields.Str(allow_none=True)
    adopter_email = fields.Str(allow_none=True)
    adopter_phone = fields.Str(allow_none=True)
    pet_id = fields.Str()
    pet_name = fields.Str(allow_none=True)
    pet_image = fields.Str(allow_none=True)
    status = fields.Str()
    date = fields.DateTime()
    shelter_response = fields.Nested(ShelterResponseSchema, allow_none=True)
