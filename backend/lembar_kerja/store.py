# backend/lembar_kerja/store.py
"""Record Store Client untuk tabel `worksheets`.

Controller hanya bergantung pada `WorksheetStore`; implementasi nyata memakai
session Flask-SQLAlchemy, sedangkan test memakai fake in-memory.
Setiap operasi adalah satu kali round trip ke database dan tidak di-retry.
"""
import logging
from sqlalchemy.exc import SQLAlchemyError

from . import db
from .errors import NotFound, TransportError
from .models import MUTABLE_FIELDS, Worksheet, utcnow

logger = logging.getLogger(__name__)


class WorksheetStore:
    """Kontrak select/insert/update/delete terhadap tabel worksheets."""

    def list(self):
        """Semua lembar kerja, urut updated_at terbaru dulu."""
        raise NotImplementedError

    def get_by_id(self, worksheet_id):
        raise NotImplementedError

    def insert(self, draft):
        raise NotImplementedError

    def update(self, worksheet_id, fields):
        raise NotImplementedError

    def delete(self, worksheet_id):
        raise NotImplementedError


class SqlAlchemyWorksheetStore(WorksheetStore):

    def __init__(self, session=None):
        self.session = session if session is not None else db.session

    def _fail(self, action, error):
        self.session.rollback()
        logger.error(f"Gagal {action} lembar kerja: {error}")
        return TransportError(f"Gagal {action} lembar kerja: {error}")

    def list(self):
        try:
            records = self.session.execute(
                db.select(Worksheet).order_by(Worksheet.updated_at.desc(), Worksheet.created_at.desc())
            ).scalars()
            return [r.to_dict() for r in records]
        except SQLAlchemyError as e:
            raise self._fail("memuat", e) from e

    def get_by_id(self, worksheet_id):
        try:
            worksheet = self.session.get(Worksheet, worksheet_id)
        except SQLAlchemyError as e:
            raise self._fail("memuat", e) from e
        if worksheet is None:
            raise NotFound(worksheet_id)
        return worksheet.to_dict()

    def insert(self, draft):
        now = utcnow()
        values = {k: v for k, v in draft.items() if k in MUTABLE_FIELDS and k != "updated_at"}
        try:
            worksheet = Worksheet(created_at=now, updated_at=now, **values)
            self.session.add(worksheet)
            self.session.commit()
            return worksheet.to_dict()
        except SQLAlchemyError as e:
            raise self._fail("menyimpan", e) from e

    def update(self, worksheet_id, fields):
        try:
            worksheet = self.session.get(Worksheet, worksheet_id)
            if worksheet is None:
                raise NotFound(worksheet_id)
            for key, value in fields.items():
                if key in MUTABLE_FIELDS:
                    setattr(worksheet, key, value)
            if "updated_at" not in fields:
                worksheet.updated_at = utcnow()
            self.session.commit()
            return worksheet.to_dict()
        except SQLAlchemyError as e:
            raise self._fail("memperbarui", e) from e

    def delete(self, worksheet_id):
        try:
            worksheet = self.session.get(Worksheet, worksheet_id)
            if worksheet is None:
                raise NotFound(worksheet_id)
            self.session.delete(worksheet)
            self.session.commit()
        except SQLAlchemyError as e:
            raise self._fail("menghapus", e) from e
