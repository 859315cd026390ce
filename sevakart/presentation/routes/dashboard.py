from flask import Blueprint, jsonify

from sevakart.presentation.routes.access import login_identity_required
from sevakart.services.dashboard_service import DashboardService

bp = Blueprint('dashboard', __name__)


@bp.get('/dashboard')
@login_identity_required
def summary(identity):
    return jsonify({'role': identity.role, 'summary': DashboardService.summary_for(identity)})
