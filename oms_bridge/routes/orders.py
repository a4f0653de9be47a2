from flask import current_app, redirect, render_template, url_for
from flask_login import login_required

from oms_bridge.auth import get_admin_client
from oms_bridge.errors import ShopifyAPIError, UserErrors
from oms_bridge.forms import OrderForm
from oms_bridge.models import Product
from oms_bridge.services.catalog import create_order
from . import main

@main.route('/app/orders/create', methods=['GET', 'POST'])
@login_required
def orders_create():
    products = Product.all()
    form = OrderForm()
    form.set_products(products)
    errors = {}

    if form.validate_on_submit():
        product = Product.find(form.product_id.data)
        if product is None:
            errors = {"product_id": "Selected product could not be found"}
        else:
            try:
                create_order(
                    get_admin_client(),
                    product,
                    form.order_name.data.strip(),
                    current_app.config["ORDER_CURRENCY"],
                )
            except UserErrors as e:
                errors = e.fields
            except ShopifyAPIError as e:
                errors = {"general": e.message}
            else:
                return redirect(url_for('main.index'))

    prices = {product.option_value: product.get("price") for product in products}
    return render_template('orders_create.html', form=form, errors=errors, prices=prices)
