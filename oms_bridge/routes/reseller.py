from flask import current_app, render_template
from flask_login import current_user, login_required

from oms_bridge.auth import get_admin_client
from oms_bridge.forms import ResellerForm
from oms_bridge.services.partners import PartnerClient
from oms_bridge.services.reseller import SalesChannelConnector
from oms_bridge.utils.response import error_response, result_response
from . import main

@main.route('/app/reseller', methods=['GET'])
@login_required
def reseller():
    return render_template('reseller.html', form=ResellerForm())

@main.route('/app/reseller', methods=['POST'])
@login_required
def reseller_submit():
    form = ResellerForm()
    if not form.validate_on_submit():
        return error_response("Invalid form submission.", error=form.errors, code=400)

    connector = SalesChannelConnector(
        admin=get_admin_client(),
        session=current_user,
        partners=PartnerClient.from_config(current_app.config),
        prefix=current_app.config["SALES_CHANNEL_PREFIX"],
    )
    return result_response(connector.run(form.token_input.data))
