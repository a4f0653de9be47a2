from flask import redirect, render_template, request, url_for
from flask_login import current_user, login_required

from oms_bridge.auth import get_admin_client, is_valid_shop_domain
from oms_bridge.errors import ShopifyAPIError
from oms_bridge.services.webhook_registry import list_webhooks
from . import main

@main.route('/')
def root():
    shop = request.args.get('shop')
    if is_valid_shop_domain(shop):
        return redirect(url_for('main.index', **request.args))
    return redirect(url_for('auth.login'))

@main.route('/app')
@login_required
def index():
    return render_template('index.html', shop=current_user.shop)

@main.route('/app/debug/webhooks')
@login_required
def debug_webhooks():
    try:
        webhooks = list_webhooks(get_admin_client())
    except ShopifyAPIError as e:
        return render_template('debug_webhooks.html', data={"success": False, "error": e.message})
    return render_template('debug_webhooks.html', data={"success": True, "webhooks": webhooks})
