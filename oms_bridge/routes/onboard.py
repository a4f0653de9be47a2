from flask import current_app, render_template
from flask_login import current_user, login_required

from oms_bridge.auth import get_admin_client
from oms_bridge.forms import OnboardForm
from oms_bridge.services.onboarding import BrandOnboarding
from oms_bridge.services.partners import PartnerClient
from oms_bridge.utils.response import error_response, result_response
from . import main

@main.route('/app/onboard', methods=['GET'])
@login_required
def onboard():
    return render_template('onboard.html', form=OnboardForm())

@main.route('/app/onboard', methods=['POST'])
@login_required
def onboard_submit():
    form = OnboardForm()
    if not form.validate_on_submit():
        return error_response("Invalid form submission.", error=form.errors, code=400)

    result = BrandOnboarding(
        admin=get_admin_client(),
        session=current_user,
        partners=PartnerClient.from_config(current_app.config),
    ).run()
    return result_response(result)
