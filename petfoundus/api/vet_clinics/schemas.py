# petfoundus/api/vet_clinics/schemas.py
from marshmallow import Schema, fields, validate


class NearbyQuerySchema(Schema):
    """GET /api/vet-clinics/nearby 쿼리 파라미터."""
    lat = fields.Float(required=True, validate=validate.Range(min=-90, max=90),
                       error_messages={"required": "lat and lng are required"})
    lng = fields.Float(required=True, validate=validate.Range(min=-180, max=180),
                       error_messages={"required": "lat and lng are required"})


class VetClinicResponseSchema(Schema):
    clinic_id = fields.Str()
    name = fields.Str()
    address = fields.Str(allow_none=True)
    phone = fields.Str(allow_none=True)
    lat = fields.Float()
    lng = fields.Float()
    distance = fields.Float()
