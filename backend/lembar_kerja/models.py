# backend/lembar_kerja/models.py
import uuid
from datetime import datetime, timezone

from sqlalchemy.types import DateTime, TypeDecorator

from . import db

WORKSHEET_TYPES = ("PPh 21", "PPh 23", "PPN", "PPh Badan", "PPh Final UMKM")
STATUS_OPTIONS = ("Draft", "Dalam Proses", "Menunggu Review", "Selesai")

# Kolom yang boleh diubah lewat update; id dan created_at tidak pernah ditulis ulang.
MUTABLE_FIELDS = ("client_name", "type", "period", "status", "assignee", "amount", "notes", "updated_at")


def _new_id():
    return str(uuid.uuid4())


def utcnow():
    return datetime.now(timezone.utc)


class UTCDateTime(TypeDecorator):
    """DateTime yang selalu kembali sebagai UTC aware.

    SQLite menyimpan tanpa offset, jadi nilai naive dianggap UTC.
    """
    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value, dialect):
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class Worksheet(db.Model):
    __tablename__ = 'worksheets'
    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    client_name = db.Column(db.String(255), nullable=False)
    type = db.Column(db.String(50), nullable=False)
    period = db.Column(db.String(100), nullable=False)
    status = db.Column(db.String(50), nullable=False, default="Draft")
    assignee = db.Column(db.String(255), nullable=True)
    amount = db.Column(db.Numeric(15, 2), nullable=True)
    notes = db.Column(db.Text, nullable=True)
    created_at = db.Column(UTCDateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = db.Column(UTCDateTime(timezone=True), nullable=False, default=utcnow, index=True)

    def to_dict(self):
        return {
            "id": self.id,
            "client_name": self.client_name,
            "type": self.type,
            "period": self.period,
            "status": self.status,
            "assignee": self.assignee,
            "amount": float(self.amount) if self.amount is not None else None,
            "notes": self.notes,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
