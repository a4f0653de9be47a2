from flask import Blueprint

main = Blueprint('main', __name__)

from . import index, products, orders, onboard, reseller  # noqa: E402,F401
