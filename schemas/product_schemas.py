from decimal import Decimal

from marshmallow import EXCLUDE, Schema, ValidationError, fields, pre_load, validate, validates

from common.field_codec import LIST_DELIMITER

ATTACHMENT_FIELDS = ('image', 'pdf')


class ProductBaseSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    name = fields.String(required=True, validate=validate.Length(min=1, max=256))
    characteristics = fields.String(required=True, validate=validate.Length(min=1, max=10000))
    description = fields.String(allow_none=True, validate=validate.Length(max=10000))
    benefits = fields.List(
        fields.String(validate=validate.Length(min=1, max=255)),
        required=True,
        validate=validate.Length(min=1)
    )
    compatibility = fields.String(required=True, validate=validate.Length(min=1, max=10000))
    price = fields.Decimal(
        required=True,
        places=2,
        validate=validate.Range(min=0, max=Decimal('999999.99'), min_inclusive=False)
    )
    stock = fields.Integer(required=True, strict=True, validate=validate.Range(min=0, max=10000))
    category_id = fields.Integer(required=True, strict=True)
    subcategory_id = fields.List(fields.Integer(strict=True), required=True, validate=validate.Length(min=1))

    # base64 data URLs
    image = fields.String(allow_none=True)
    pdf = fields.String(allow_none=True)

    @pre_load
    def strip_strings(self, data, **kwargs):
        if not isinstance(data, dict):
            return data
        cleaned = {}
        for key, value in data.items():
            if isinstance(value, str):
                value = value.strip()
            elif key == 'benefits' and isinstance(value, list):
                value = [item.strip() if isinstance(item, str) else item for item in value]
            cleaned[key] = value
        return cleaned

    @validates('benefits')
    def validate_benefits(self, value, **kwargs):
        if any(LIST_DELIMITER in item for item in value):
            raise ValidationError(f"Benefits cannot contain the character '{LIST_DELIMITER}'.")


class CreateProductSchema(ProductBaseSchema):

    @pre_load
    def drop_empty_attachments(self, data, **kwargs):
        if isinstance(data, dict):
            for key in ATTACHMENT_FIELDS:
                value = data.get(key)
                if isinstance(value, str) and not value.strip():
                    data.pop(key)
        return data


class UpdateProductSchema(ProductBaseSchema):
    """Every field is optional; blank values are treated as not sent."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        for field_name, field_obj in self.fields.items():
            field_obj.required = False

    @pre_load
    def drop_blank_values(self, data, **kwargs):
        if not isinstance(data, dict):
            return data
        return {
            key: value for key, value in data.items()
            if not (isinstance(value, str) and value.strip() == '')
        }
