# petfoundus/api/adopters/schemas.py
from marshmallow import Schema, fields, validate, pre_load

from petfoundus.models.adopter import ExperienceLevel, PREFERRED_SIZES, PREFERRED_AGES
from petfoundus.models.pet import TEMPERAMENT_LABELS

# 말레이시아 휴대전화 번호 (+601 + 8자리)
PHONE_PATTERN = r'^\+601\d{8}$'
FULL_NAME_PATTERN = r"^[A-Za-z\s\-'.]{2,}$"


class _EmailNormalizingSchema(Schema):
    @pre_load
    def normalize_email(self, data, **kwargs):
        if isinstance(data, dict) and isinstance(data.get('email'), str):
            data = dict(data, email=data['email'].strip().lower())
        return data


class AdopterRegisterSchema(_EmailNormalizingSchema):
    """POST /api/adopters/register 요청 스키마."""
    email = fields.Email(required=True)
    password = fields.Str(required=True, load_only=True, validate=validate.Length(min=6))
    full_name = fields.Str(required=True, validate=validate.Regexp(
        FULL_NAME_PATTERN, error="Full name must be at least 2 letters (letters, spaces, - ' . only)."))
    phone = fields.Str(required=True, validate=validate.Regexp(
        PHONE_PATTERN, error="Phone must be a Malaysian mobile number like +60123456789."))


class LoginSchema(_EmailNormalizingSchema):
    """입양자/보호소 공용 로그인 요청 스키마."""
    email = fields.Email(required=True)
    password = fields.Str(required=True, load_only=True)


class AddressSchema(Schema):
    street = fields.Str(allow_none=True)
    city = fields.Str(allow_none=True)
    state = fields.Str(allow_none=True)
    postal_code = fields.Str(allow_none=True)


class PreferencesSchema(Schema):
    preferred_size = fields.List(fields.Str(validate=validate.OneOf(PREFERRED_SIZES)))
    preferred_age = fields.List(fields.Str(validate=validate.OneOf(PREFERRED_AGES)))
    preferred_temperament = fields.List(fields.Str(validate=validate.OneOf(TEMPERAMENT_LABELS)))
    has_garden = fields.Bool()
    has_other_pets = fields.Bool()
    has_children = fields.Bool()
    experience_level = fields.Str(validate=validate.OneOf([e.value for e in ExperienceLevel]))


class AdopterUpdateSchema(Schema):
    """PUT /api/adopters/<adopter_id> 부분 업데이트 스키마."""
    full_name = fields.Str(validate=validate.Regexp(FULL_NAME_PATTERN))
    phone = fields.Str(validate=validate.Regexp(PHONE_PATTERN))
    address = fields.Nested(AddressSchema)
    preferences = fields.Nested(PreferencesSchema)


class AdoptedPetSchema(Schema):
    pet_id = fields.Str()
    shelter_id = fields.Str(allow_none=True)
    adoption_date = fields.DateTime(allow_none=True)
    pet = fields.Dict(allow_none=True)


class AdopterResponseSchema(Schema):
    """입양자 프로필 응답 스키마 (비밀번호 해시 제외)."""
    adopter_id = fields.Str(dump_only=True)
    email = fields.Str()
    full_name = fields.Str()
    phone = fields.Str()
    address = fields.Dict()
    preferences = fields.Dict()
    adopted_pets = fields.List(fields.Nested(AdoptedPetSchema))
    is_active = fields.Bool()
    created_at = fields.DateTime(allow_none=True)
    updated_at = fields.DateTime(allow_none=True)
