from __future__ import annotations

import io
from datetime import date

from flask import Blueprint, jsonify, send_file

from app.prioritizer.auth import login_required
from app.prioritizer.modules.reports.service import build_matrix, build_summary, export_features_csv
from app.prioritizer.web import current_store

bp = Blueprint("reports", __name__)


@bp.get("/features/matrix")
@login_required
def features_matrix():
    return jsonify(build_matrix(current_store().list_features()))


@bp.get("/reports/summary")
@login_required
def reports_summary():
    return jsonify(build_summary(current_store().list_features()))


@bp.get("/reports/features.csv")
@login_required
def reports_features_csv():
    data = export_features_csv(current_store().list_features())
    filename = f"features_export_{date.today().strftime('%Y%m%d')}.csv"
    return send_file(
        io.BytesIO(data),
        mimetype="text/csv",
        as_attachment=True,
        download_name=filename,
        max_age=0,
    )
