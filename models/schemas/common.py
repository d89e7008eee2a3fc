from marshmallow import Schema, fields, pre_load, validate


def norm_email(v):
    return v.strip().lower() if isinstance(v, str) else v


class StrippedSchema(Schema):
    """Trims surrounding whitespace from string values before validation.

    Fields named in ``keep_whitespace`` (secrets) are passed through as-is.
    """

    keep_whitespace = ("password",)

    @pre_load
    def strip(self, data, **kwargs):
        if not isinstance(data, dict):
            return data
        return {
            k: v.strip() if isinstance(v, str) and k not in self.keep_whitespace else v
            for k, v in data.items()
        }


class CoordinateSchema(Schema):
    lat = fields.Float(required=True, validate=validate.Range(min=-90, max=90))
    lon = fields.Float(required=True, validate=validate.Range(min=-180, max=180))
