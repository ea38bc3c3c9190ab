# petfoundus/api/pets/schemas.py
from marshmallow import Schema, fields, validate
from petfoundus.models.pet import (
    Species, PetGender, PetSize, AdoptionStatus, TEMPERAMENT_LABELS, GOOD_WITH_LABELS
)


class PetAgeSchema(Schema):
    years = fields.Int(load_default=0, validate=validate.Range(min=0, max=40))
    months = fields.Int(load_default=0, validate=validate.Range(min=0, max=11))


class PetAgeUpdateSchema(Schema):
    """부분 업데이트용. 보내지 않은 필드는 기존 값을 유지합니다."""
    years = fields.Int(validate=validate.Range(min=0, max=40))
    months = fields.Int(validate=validate.Range(min=0, max=11))


class PetImageSchema(Schema):
    url = fields.Str(required=True)
    caption = fields.Str(allow_none=True)


class PetLabelsSchema(Schema):
    temperament = fields.List(fields.Str(validate=validate.OneOf(TEMPERAMENT_LABELS)), load_default=list)
    good_with = fields.List(fields.Str(validate=validate.OneOf(GOOD_WITH_LABELS)), load_default=list)


class PetLabelsUpdateSchema(Schema):
    temperament = fields.List(fields.Str(validate=validate.OneOf(TEMPERAMENT_LABELS)))
    good_with = fields.List(fields.Str(validate=validate.OneOf(GOOD_WITH_LABELS)))


class HealthStatusSchema(Schema):
    vaccinated = fields.Bool()
    neutered = fields.Bool()
    medical_conditions = fields.List(fields.Str())
    last_vet_visit = fields.Date(allow_none=True)
    next_vaccination_due = fields.Date(allow_none=True)


class PetCreateSchema(Schema):
    """POST /api/shelters/<shelter_id>/pets 반려동물 등록 요청 스키마."""
    name = fields.Str(required=True, validate=validate.Length(min=1, max=50))
    species = fields.Str(load_default=Species.DOG.value, validate=validate.OneOf([e.value for e in Species]))
    breed = fields.Str(allow_none=True, validate=validate.Length(max=50))
    gender = fields.Str(required=True, validate=validate.OneOf([e.value for e in PetGender]))
    age = fields.Nested(PetAgeSchema, load_default=lambda: {"years": 0, "months": 0})
    size = fields.Str(load_default=PetSize.MEDIUM.value, validate=validate.OneOf([e.value for e in PetSize]))
    images = fields.List(fields.Nested(PetImageSchema), load_default=list)
    labels = fields.Nested(PetLabelsSchema, load_default=lambda: {"temperament": [], "good_with": []})
    health_status = fields.Nested(HealthStatusSchema, load_default=dict)
    description = fields.Str(allow_none=True, validate=validate.Length(max=1000))
    special_needs = fields.Str(allow_none=True)
    behavior_notes = fields.Str(allow_none=True)


class PetUpdateSchema(Schema):
    """PUT /api/shelters/<shelter_id>/pets/<pet_id> 부분 업데이트 스키마. Adopted 전환은 입양 승인으로만 가능합니다."""
    name = fields.Str(validate=validate.Length(min=1, max=50))
    species = fields.Str(validate=validate.OneOf([e.value for e in Species]))
    breed = fields.Str(allow_none=True, validate=validate.Length(max=50))
    gender = fields.Str(validate=validate.OneOf([e.value for e in PetGender]))
    age = fields.Nested(PetAgeUpdateSchema)
    size = fields.Str(validate=validate.OneOf([e.value for e in PetSize]))
    images = fields.List(fields.Nested(PetImageSchema))
    labels = fields.Nested(PetLabelsUpdateSchema)
    health_status = fields.Nested(HealthStatusSchema)
    adoption_status = fields.Str(validate=validate.OneOf([AdoptionStatus.AVAILABLE.value, AdoptionStatus.PENDING.value]))
    description = fields.Str(allow_none=True, validate=validate.Length(max=1000))
    special_needs = fields.Str(allow_none=True)
    behavior_notes = fields.Str(allow_none=True)


class ShelterSummarySchema(Schema):
    shelter_id = fields.Str()
    name = fields.Str()
    location = fields.Dict()
    phone = fields.Str(allow_none=True)
    email = fields.Str()


class PetResponseSchema(Schema):
    """반려동물 응답 스키마."""
    pet_id = fields.Str()
    shelter_id = fields.Str()
    name = fields.Str()
    species = fields.Str()
    breed = fields.Str(allow_none=True)
    gender = fields.Str()
    age = fields.Dict()
    size = fields.Str()
    images = fields.List(fields.Dict())
    labels = fields.Dict()
    health_status = fields.Dict()
    vaccination_history = fields.List(fields.Dict())
    adoption_status = fields.Str()
    adopted_by = fields.Str(allow_none=True)
    adoption_date = fields.DateTime(allow_none=True)
    description = fields.Str(allow_none=True)
    special_needs = fields.Str(allow_none=True)
    behavior_notes = fields.Str(allow_none=True)
    created_at = fields.DateTime(allow_none=True)
    updated_at = fields.DateTime(allow_none=True)
    shelter = fields.Nested(ShelterSummarySchema, allow_none=True)
    compatibility_score = fields.Int()
