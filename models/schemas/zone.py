from marshmallow import Schema, fields, post_load, validate

from models.schemas.common import CoordinateSchema, StrippedSchema
from models.zone import Coordinate, ServiceZone


class ZoneConfigSchema(Schema):
    """One entry of the zones configuration file."""
    id = fields.String(required=True, validate=validate.Length(min=1))
    name = fields.String(required=True)
    city = fields.String(required=True)
    is_active = fields.Boolean(load_default=True)
    # fewer than 3 vertices is accepted here; such zones simply never match
    polygon = fields.List(fields.Nested(CoordinateSchema), load_default=list)

    @post_load
    def make_zone(self, data, **kwargs):
        data["polygon"] = tuple(Coordinate(p["lat"], p["lon"]) for p in data["polygon"])
        return ServiceZone(**data)


class ZoneOutSchema(Schema):
    id = fields.String()
    name = fields.String()
    city = fields.String()
    polygon = fields.Method("get_polygon")

    def get_polygon(self, obj):
        return [{"lat": p.lat, "lon": p.lon} for p in obj.polygon]


class AddressQuerySchema(StrippedSchema):
    address = fields.String(required=True, validate=validate.Length(min=1))
    city = fields.String(required=True, validate=validate.Length(min=1))


class GeocodeQuerySchema(StrippedSchema):
    address = fields.String(required=True, validate=validate.Length(min=1))


class SearchQuerySchema(StrippedSchema):
    query = fields.String(required=True, validate=validate.Length(min=1))


class GeocodeResultOutSchema(Schema):
    latitude = fields.Float(attribute="lat")
    longitude = fields.Float(attribute="lon")
    display_name = fields.String(allow_none=True)
