import math

from flask_wtf import FlaskForm
from wtforms import FloatField, SelectField, StringField
from wtforms.validators import DataRequired, Length, ValidationError


class LoginForm(FlaskForm):
    shop = StringField("Shop domain", validators=[DataRequired(), Length(max=255)])


class ProductForm(FlaskForm):
    title = StringField("Title", validators=[DataRequired(message="Title is required")])
    price = FloatField("Price", validators=[DataRequired(message="Price is required")])

    def validate_price(self, field):
        # FloatField parses "nan" and "inf"
        if not math.isfinite(field.data):
            raise ValidationError("Price must be a finite number")


class OrderForm(FlaskForm):
    order_name = StringField("Order Name", validators=[DataRequired(message="Order name is required")])
    product_id = SelectField("Product", choices=[], validators=[DataRequired(message="Select a product")])

    def set_products(self, products):
        self.product_id.choices = [("", "Select a product")] + [
            (product.option_value, product.option_label) for product in products
        ]


class OnboardForm(FlaskForm):
    pass


class ResellerForm(FlaskForm):
    # Format checks happen in parse_connection_token so the JSON answer carries them
    token_input = StringField("Token")
