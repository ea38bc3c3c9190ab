# petfoundus/api/reminders/schemas.py
from datetime import timezone

from marshmallow import Schema, fields, validate

from petfoundus.models.care_reminder import ReminderStatus
from petfoundus.models.reminder_template import ReminderCategory

CATEGORY_VALUES = [e.value for e in ReminderCategory]


class CareReminderResponseSchema(Schema):
    """케어 리마인더 응답 스키마."""
    reminder_id = fields.Str()
    pet_id = fields.Str()
    adopter_id = fields.Str()
    shelter_id = fields.Str()
    template_id = fields.Str(allow_none=True)
    title = fields.Str()
    description = fields.Str(allow_none=True)
    category = fields.Str()
    due_date = fields.DateTime()
    status = fields.Str()
    completed_at = fields.DateTime(allow_none=True)
    notes = fields.Str(allow_none=True)
    created_by = fields.Str()
    updated_by = fields.Str()
    created_at = fields.DateTime(allow_none=True)


class ReminderShelterUpdateSchema(Schema):
    """PUT /api/reminders/<reminder_id> 보호소의 리마인더 조정 요청 스키마."""
    due_date = fields.AwareDateTime(default_timezone=timezone.utc)
    notes = fields.Str(allow_none=True, validate=validate.Length(max=500))
    status = fields.Str(validate=validate.OneOf([e.value for e in ReminderStatus]))


class ReminderTemplateCreateSchema(Schema):
    """POST /api/shelters/<shelter_id>/reminder-templates 요청 스키마."""
    title = fields.Str(required=True, validate=validate.Length(min=1, max=100))
    category = fields.Str(required=True, validate=validate.OneOf(CATEGORY_VALUES))
    days_after_adoption = fields.Int(required=True, validate=validate.Range(min=0, max=3650))
    description = fields.Str(allow_none=True, validate=validate.Length(max=500))
    active = fields.Bool(load_default=True)


class ReminderTemplateUpdateSchema(Schema):
    """PATCH 부분 업데이트용 스키마."""
    title = fields.Str(validate=validate.Length(min=1, max=100))
    category = fields.Str(validate=validate.OneOf(CATEGORY_VALUES))
    days_after_adoption = fields.Int(validate=validate.Range(min=0, max=3650))
    description = fields.Str(allow_none=True, validate=validate.Length(max=500))
    active = fields.Bool()


class ReminderTemplateResponseSchema(Schema):
    template_id = fields.Str()
    shelter_id = fields.Str()
    title = fields.Str()
    category = fields.Str()
    days_after_adoption = fields.Int()
    description = fields.Str(allow_none=True)
    active = fields.Bool()
