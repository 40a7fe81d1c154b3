from __future__ import annotations

from io import BytesIO

from flask import Blueprint, current_app, jsonify, request, send_file

from hr2.reports.excel import build_workbook_bytes
from hr2.reports.queries import competency_summary, results_report
from hr2.utils.auth import ROLE_ADMIN, require_roles
from hr2.utils.errors import bad_request
from hr2.utils.validators import parse_date_range

reports_bp = Blueprint("reports", __name__)


@reports_bp.get("/competency")
@require_roles([ROLE_ADMIN])
def competency():
    db = current_app.extensions["mongo_db"]
    return jsonify({"success": True, "data": competency_summary(db)})


@reports_bp.get("/results")
@require_roles([ROLE_ADMIN])
def results():
    start_dt, end_dt, from_s, to_s = parse_date_range(request.args)
    db = current_app.extensions["mongo_db"]
    data = results_report(db, start_dt, end_dt)
    return jsonify({"success": True, "data": {"from": from_s, "to": to_s, **data}})


@reports_bp.get("/export.xlsx")
@require_roles([ROLE_ADMIN])
def export_xlsx():
    report_type = str(request.args.get("type") or "").strip().lower() or "competency"
    if report_type not in {"competency", "results"}:
        raise bad_request("type must be competency|results")

    db = current_app.extensions["mongo_db"]
    window = None
    if report_type == "competency":
        payload = {"competency": competency_summary(db)}
    else:
        start_dt, end_dt, from_s, to_s = parse_date_range(request.args)
        payload = {"results": results_report(db, start_dt, end_dt)}
        window = (from_s, to_s)

    xlsx_bytes = build_workbook_bytes(
        report_type=report_type,
        timezone_display=current_app.config["CFG"].TIMEZONE_DISPLAY,
        data=payload,
        window=window,
    )

    suffix = f"_{window[0]}_{window[1]}" if window else ""
    return send_file(
        BytesIO(xlsx_bytes),
        as_attachment=True,
        download_name=f"hr2_{report_type}{suffix}.xlsx",
        mimetype="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )
