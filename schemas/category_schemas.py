from marshmallow import EXCLUDE, Schema, fields, pre_load, validate


class CategorySchema(Schema):
    class Meta:
        unknown = EXCLUDE

    name = fields.String(required=True, validate=validate.Length(min=1, max=100))

    @pre_load
    def strip_name(self, data, **kwargs):
        if isinstance(data, dict) and isinstance(data.get('name'), str):
            data = dict(data, name=data['name'].strip())
        return data


class SubcategorySchema(CategorySchema):
    pass
