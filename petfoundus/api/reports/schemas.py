# petfoundus/api/reports/schemas.py
from marshmallow import Schema, fields, validate

from petfoundus.models.pet import Species, PetGender, PetSize
from petfoundus.models.report import ReportStatus


class ReportCreateSchema(Schema):
    """POST /api/reports (multipart/form-data) 폼 필드 스키마. 사진은 'photo' 파일로 별도 전송."""
    animal_type = fields.Str(required=True, validate=validate.Length(min=1, max=50))
    number = fields.Int(required=True, validate=validate.Range(min=1, max=100))
    condition = fields.Str(required=True, validate=validate.Length(min=1, max=100))
    animal_desc = fields.Str(required=True, validate=validate.Length(min=1, max=1000))
    place_desc = fields.Str(required=True, validate=validate.Length(min=1, max=1000))
    pin_lat = fields.Float(required=True, validate=validate.Range(min=-90, max=90))
    pin_lng = fields.Float(required=True, validate=validate.Range(min=-180, max=180))


class ReportStatusUpdateSchema(Schema):
    """PATCH /api/reports/<report_id>. Rescued는 구조 API로만 설정됩니다."""
    status = fields.Str(required=True, validate=validate.OneOf([
        ReportStatus.PENDING.value, ReportStatus.INVESTIGATING.value, ReportStatus.REJECTED.value,
    ]))


class RescueRequestSchema(Schema):
    """POST /api/reports/<report_id>/rescue 최소 반려동물 정보."""
    name = fields.Str(required=True, validate=validate.Length(min=1, max=50))
    breed = fields.Str(allow_none=True, validate=validate.Length(max=50))
    gender = fields.Str(required=True, validate=validate.OneOf([e.value for e in PetGender]))
    age_years = fields.Int(load_default=0, validate=validate.Range(min=0, max=40))
    age_months = fields.Int(load_default=0, validate=validate.Range(min=0, max=11))
    size = fields.Str(validate=validate.OneOf([e.value for e in PetSize]))
    species = fields.Str(validate=validate.OneOf([e.value for e in Species]))


class ReportResponseSchema(Schema):
    report_id = fields.Str()
    reported_by = fields.Str()
    animal_type = fields.Str()
    number = fields.Int()
    condition = fields.Str()
    animal_desc = fields.Str()
    place_desc = fields.Str()
    pin = fields.Dict()
    photo_url = fields.Str(allow_none=True)
    status = fields.Str()
    created_at = fields.DateTime()
    updated_at = fields.DateTime(allow_none=True)
