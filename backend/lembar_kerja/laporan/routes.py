# backend/lembar_kerja/laporan/routes.py

import io
import pandas as pd
from datetime import datetime
from flask import Blueprint, jsonify, request, send_file
from ..worksheets.routes import Feedback, list_controller_from_args

laporan_bp = Blueprint('laporan', __name__, url_prefix='/api/laporan')

KOLOM = {
    "client_name": "Nama Klien",
    "type": "Jenis Pajak",
    "period": "Periode",
    "status": "Status",
    "assignee": "Penanggung Jawab",
    "amount": "Jumlah (Rp)",
    "notes": "Catatan",
    "created_at": "Dibuat",
    "updated_at": "Diperbarui",
}


def _row(w):
    row = {label: w.get(key) for key, label in KOLOM.items()}
    # Excel tidak menerima datetime ber-timezone
    for key in ("created_at", "updated_at"):
        value = w.get(key)
        row[KOLOM[key]] = value.strftime('%Y-%m-%d %H:%M') if value else ""
    return row


@laporan_bp.route('/export', methods=['GET'])
def export_laporan():
    feedback = Feedback()
    view = list_controller_from_args(request.args, feedback)
    if view.last_error is not None:
        return jsonify(error=feedback.last_message()), 502

    records = view.filtered
    if not records:
        return jsonify(error="Tidak ada data untuk diekspor"), 404

    df = pd.DataFrame([_row(w) for w in records], columns=list(KOLOM.values()))

    output = io.BytesIO()
    with pd.ExcelWriter(output, engine='xlsxwriter') as writer:
        df.to_excel(writer, index=False, sheet_name='Lembar Kerja')
    output.seek(0)

    return send_file(
        output,
        as_attachment=True,
        download_name=f'lembar_kerja_{datetime.now().strftime("%Y%m%d")}.xlsx',
        mimetype='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
    )
