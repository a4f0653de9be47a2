import logging
import secrets

from flask import Blueprint, abort, current_app, flash, redirect, render_template, request, session, url_for
from flask_login import login_user, logout_user

from ..auth import build_authorize_url, exchange_code, is_valid_shop_domain, verify_oauth_hmac
from ..errors import ShopifyAPIError
from ..forms import LoginForm
from ..services.webhook_registry import register_webhooks
from ..utils.helper import AdminClient

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__, url_prefix='/auth')

@auth_bp.route('/login', methods=['GET', 'POST'])
def login():
    form = LoginForm()
    if form.validate_on_submit():
        shop = form.shop.data.strip().lower()
        if "." not in shop:
            shop = f"{shop}.myshopify.com"
        if is_valid_shop_domain(shop):
            return redirect(url_for('auth.begin', shop=shop))
        flash("Please enter a valid shop domain", "danger")

    return render_template('auth/login.html', form=form)

@auth_bp.route('')
def begin():
    shop = request.args.get('shop', '')
    if not is_valid_shop_domain(shop):
        abort(400, description="Invalid shop domain")

    state = secrets.token_urlsafe(16)
    session['oauth_state'] = state
    return redirect(build_authorize_url(shop, state))

@auth_bp.route('/callback')
def callback():
    params = request.args.to_dict()
    shop = params.get('shop', '')
    if not is_valid_shop_domain(shop) or not verify_oauth_hmac(params):
        abort(400, description="Invalid OAuth callback")
    if not params.get('state') or params.get('state') != session.pop('oauth_state', None):
        abort(400, description="OAuth state mismatch")

    try:
        shop_session = exchange_code(shop, params.get('code', ''))
    except ShopifyAPIError as e:
        logger.error("[Auth] Install on %s failed: %s", shop, e.detail)
        abort(502, description="Could not complete installation")

    register_webhooks(
        AdminClient(shop, shop_session.access_token, current_app.config["SHOPIFY_API_VERSION"]),
        current_app.config.get("SHOPIFY_APP_URL") or request.host_url,
    )
    login_user(shop_session)
    return redirect(url_for('main.index', shop=shop))

@auth_bp.route('/logout')
def logout():
    logout_user()
    flash("You have been logged out.", "info")
    return redirect(url_for('auth.login'))
