# backend/lembar_kerja/worksheets/utils.py

import math
from datetime import datetime

from ..models import STATUS_OPTIONS, WORKSHEET_TYPES

TYPE_CATALOG = [
    {"id": "PPh 21", "name": "PPh 21", "description": "Pajak Penghasilan Pasal 21 - Gaji Karyawan", "color": "bg-blue-100 text-blue-800"},
    {"id": "PPh 23", "name": "PPh 23", "description": "Pajak Penghasilan Pasal 23 - Jasa dan Sewa", "color": "bg-green-100 text-green-800"},
    {"id": "PPN", "name": "PPN", "description": "Pajak Pertambahan Nilai", "color": "bg-purple-100 text-purple-800"},
    {"id": "PPh Badan", "name": "PPh Badan", "description": "Pajak Penghasilan Badan", "color": "bg-orange-100 text-orange-800"},
    {"id": "PPh Final UMKM", "name": "PPh Final UMKM", "description": "PPh Final berdasarkan PP 23/2018", "color": "bg-pink-100 text-pink-800"},
]

STATUS_BADGES = {
    "Selesai": {"variant": "default", "color": "bg-green-100 text-green-800"},
    "Dalam Proses": {"variant": "secondary", "color": "bg-blue-100 text-blue-800"},
    "Menunggu Review": {"variant": "secondary", "color": "bg-yellow-100 text-yellow-800"},
    "Draft": {"variant": "outline", "color": ""},
}

BULAN = ["Januari", "Februari", "Maret", "April", "Mei", "Juni", "Juli",
         "Agustus", "September", "Oktober", "November", "Desember"]
BULAN_SINGKAT = ["Jan", "Feb", "Mar", "Apr", "Mei", "Jun", "Jul", "Agu", "Sep", "Okt", "Nov", "Des"]


def status_badge(status):
    """Konfigurasi badge status. Status yang tidak dikenal memakai gaya Draft."""
    config = STATUS_BADGES.get(status, STATUS_BADGES["Draft"])
    return {"label": status, **config}


def format_currency(amount):
    """Format Rupiah gaya id-ID, misal 1500000 -> 'Rp 1.500.000,00'."""
    if not amount:
        return "Rp 0"
    formatted = f"{float(amount):,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")
    return f"Rp {formatted}"


def format_date(value, long=False):
    """'5 Jul 2025', atau '5 Juli 2025 14.30' bila long=True."""
    if value is None:
        return ""
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if long:
        return f"{value.day} {BULAN[value.month - 1]} {value.year} {value.hour:02d}.{value.minute:02d}"
    return f"{value.day} {BULAN_SINGKAT[value.month - 1]} {value.year}"


def parse_amount(raw):
    """Input jumlah: kosong -> None, selain itu float. ValueError bila bukan angka."""
    if raw is None:
        return None
    if isinstance(raw, bool):
        raise ValueError(f"Jumlah tidak valid: {raw}")
    if isinstance(raw, (int, float)):
        return float(raw)
    raw = str(raw).strip()
    if not raw:
        return None
    value = float(raw)
    if not math.isfinite(value):
        raise ValueError(f"Jumlah tidak valid: {raw}")
    return value


def serialize_worksheet(record):
    data = dict(record)
    for key in ("created_at", "updated_at"):
        if isinstance(data.get(key), datetime):
            data[key] = data[key].isoformat()
    data["status_badge"] = status_badge(record["status"])
    data["amount_display"] = format_currency(record.get("amount"))
    data["updated_display"] = format_date(record.get("updated_at"))
    return data


def form_options():
    return {"types": TYPE_CATALOG, "statuses": list(STATUS_OPTIONS), "default_type": WORKSHEET_TYPES[0]}
