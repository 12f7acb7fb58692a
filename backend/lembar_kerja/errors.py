# backend/lembar_kerja/errors.py


class StoreError(Exception):
    """Kesalahan dasar dari Record Store."""


class TransportError(StoreError):
    """Panggilan ke database gagal (jaringan / server)."""


class NotFound(StoreError):
    """Lembar kerja yang diminta tidak ada."""

    def __init__(self, worksheet_id):
        super().__init__(f"Lembar kerja '{worksheet_id}' tidak ditemukan")
        self.worksheet_id = worksheet_id


class ValidationError(Exception):
    """Isian form tidak valid. `errors` berisi pesan per field."""

    def __init__(self, errors):
        super().__init__("; ".join(f"{field}: {msg}" for field, msg in errors.items()))
        self.errors = errors
