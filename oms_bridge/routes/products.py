from flask import redirect, render_template, url_for
from flask_login import login_required

from oms_bridge.auth import get_admin_client
from oms_bridge.errors import ShopifyAPIError, UserErrors
from oms_bridge.forms import ProductForm
from oms_bridge.services.catalog import create_product
from . import main

@main.route('/app/products/create', methods=['GET', 'POST'])
@login_required
def products_create():
    form = ProductForm()
    errors = {}
    if form.validate_on_submit():
        try:
            create_product(get_admin_client(), form.title.data.strip(), form.price.data)
        except UserErrors as e:
            errors = e.fields
        except ShopifyAPIError as e:
            errors = {"general": e.message}
        else:
            return redirect(url_for('main.index'))
    return render_template('products_create.html', form=form, errors=errors)
