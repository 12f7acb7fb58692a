# backend/lembar_kerja/worksheets/controllers.py
"""Controller daftar, detail dan form lembar kerja.

Controller tidak tahu soal Flask. Kolaborator luar diberikan sebagai callable:
`notify(kategori, pesan)` untuk toast, `navigate(path)` untuk pindah halaman,
dan `on_success()` milik form untuk memicu refresh view pemanggil.
Setelah `teardown()`, hasil panggilan store yang datang belakangan diabaikan.
"""
import logging
from datetime import datetime, timedelta

from ..errors import StoreError, ValidationError
from ..models import STATUS_OPTIONS, WORKSHEET_TYPES, utcnow
from .utils import TYPE_CATALOG, parse_amount

logger = logging.getLogger(__name__)

LIST_PATH = "/worksheets"
ALL = "all"

LOAD_FAILED = "Gagal memuat data lembar kerja"
DELETE_FAILED = "Gagal menghapus lembar kerja"
DELETED = "Lembar kerja berhasil dihapus"
SAVE_FAILED = "Gagal menyimpan lembar kerja"
CREATED = "Lembar kerja berhasil dibuat"
UPDATED = "Lembar kerja berhasil diperbarui"

SEARCH_FIELDS = ("client_name", "type", "period", "assignee")
NULLABLE_TEXT_FIELDS = ("assignee", "notes")

# Tab tampilan daftar; "all" berisi seluruh hasil filter.
GROUP_STATUSES = {
    "in_progress": "Dalam Proses",
    "review": "Menunggu Review",
    "completed": "Selesai",
}


def _noop(*args, **kwargs):
    pass


def matches_filters(worksheet, status=ALL, type_=ALL, search=""):
    """Predikat filter daftar: status AND jenis AND pencarian teks."""
    if status != ALL and worksheet.get("status") != status:
        return False
    if type_ != ALL and worksheet.get("type") != type_:
        return False
    if search:
        needle = search.lower()
        return any(
            worksheet.get(field) and needle in worksheet[field].lower()
            for field in SEARCH_FIELDS
        )
    return True


def compute_stats(worksheets):
    """Rekap per jenis pajak untuk kelima jenis yang dikenal."""
    stats = []
    for entry in TYPE_CATALOG:
        of_type = [w for w in worksheets if w.get("type") == entry["id"]]
        count = len(of_type)
        completed = sum(1 for w in of_type if w.get("status") == "Selesai")
        stats.append({
            **entry,
            "count": count,
            "completed": completed,
            "in_progress": sum(1 for w in of_type if w.get("status") == "Dalam Proses"),
            "pending": sum(1 for w in of_type if w.get("status") in ("Draft", "Menunggu Review")),
            "completion_rate": completed / count * 100 if count else 0,
        })
    return stats


class _ViewController:

    def __init__(self, store, notify=None, navigate=None):
        self.store = store
        self.notify = notify or _noop
        self.navigate = navigate or _noop
        self.mounted = False
        self.loading = True
        self.last_error = None
        self._forms = []

    def mount(self):
        self.mounted = True
        return self.refresh()

    def teardown(self):
        self.mounted = False
        for form in self._forms:
            form.teardown()

    def _open_form(self, worksheet=None):
        form = WorksheetFormController(
            self.store, worksheet=worksheet, notify=self.notify, on_success=self.refresh
        )
        self._forms.append(form)
        return form

    def refresh(self):
        raise NotImplementedError


class WorksheetListController(_ViewController):

    def __init__(self, store, notify=None, navigate=None):
        super().__init__(store, notify, navigate)
        self.worksheets = []
        self.status_filter = ALL
        self.type_filter = ALL
        self.search = ""

    def refresh(self):
        if not self.mounted:
            return False
        try:
            records = self.store.list()
        except StoreError as e:
            if self.mounted:
                logger.error(f"Error fetching worksheets: {e}")
                self.last_error = e
                self.loading = False
                self.notify("error", LOAD_FAILED)
            return False
        if not self.mounted:
            return False
        self.worksheets = records
        self.last_error = None
        self.loading = False
        return True

    @property
    def filtered(self):
        return [
            w for w in self.worksheets
            if matches_filters(w, self.status_filter, self.type_filter, self.search)
        ]

    def stats(self):
        return compute_stats(self.worksheets)

    def groups(self):
        filtered = self.filtered
        groups = {ALL: filtered}
        for name, status in GROUP_STATUSES.items():
            groups[name] = [w for w in filtered if w.get("status") == status]
        return groups

    def empty_message(self):
        if not self.worksheets:
            return "Belum ada lembar kerja"
        if not self.filtered:
            return "Tidak ada data yang sesuai dengan filter"
        return None

    def create_form(self):
        return self._open_form()


class WorksheetDetailController(_ViewController):

    def __init__(self, store, worksheet_id, notify=None, navigate=None):
        super().__init__(store, notify, navigate)
        self.worksheet_id = worksheet_id
        self.worksheet = None

    def refresh(self):
        if not self.mounted:
            return False
        try:
            record = self.store.get_by_id(self.worksheet_id)
        except StoreError as e:
            if self.mounted:
                logger.error(f"Error fetching worksheet {self.worksheet_id}: {e}")
                self.last_error = e
                self.loading = False
                self.notify("error", LOAD_FAILED)
                self.navigate(LIST_PATH)
            return False
        if not self.mounted:
            return False
        self.worksheet = record
        self.last_error = None
        self.loading = False
        return True

    def edit_form(self):
        if self.worksheet is None:
            raise RuntimeError("Lembar kerja belum dimuat")
        return self._open_form(self.worksheet)

    def delete(self):
        """Hapus permanen. Gagal -> tetap di halaman, record tidak dibuang dari state."""
        try:
            self.store.delete(self.worksheet_id)
        except StoreError as e:
            if self.mounted:
                logger.error(f"Error deleting worksheet {self.worksheet_id}: {e}")
                self.last_error = e
                self.notify("error", DELETE_FAILED)
            return False
        if self.mounted:
            self.notify("success", DELETED)
            self.navigate(LIST_PATH)
        return True


class WorksheetFormController:
    """Draft lembar kerja dalam mode create (worksheet=None) atau edit."""

    def __init__(self, store, worksheet=None, notify=None, on_success=None, clock=utcnow):
        self.store = store
        self.worksheet = worksheet
        self.notify = notify or _noop
        self.on_success = on_success or _noop
        self.clock = clock
        self.draft = self._initial_draft()
        self.errors = {}
        self.submitting = False
        self.is_open = True
        self.mounted = True
        self.saved = None
        self.last_error = None
        self._entered = set()

    @property
    def is_editing(self):
        return self.worksheet is not None

    @property
    def title(self):
        return "Edit Lembar Kerja" if self.is_editing else "Buat Lembar Kerja Baru"

    @property
    def submit_label(self):
        if self.submitting:
            return "Menyimpan..."
        return "Perbarui" if self.is_editing else "Buat"

    def _initial_draft(self):
        if self.worksheet is None:
            return {
                "client_name": "",
                "type": WORKSHEET_TYPES[0],
                "period": "",
                "status": "Draft",
                "assignee": "",
                "amount": None,
                "notes": "",
            }
        w = self.worksheet
        return {
            "client_name": w["client_name"],
            "type": w["type"],
            "period": w["period"],
            "status": w["status"],
            "assignee": w.get("assignee") or "",
            "amount": w.get("amount"),
            "notes": w.get("notes") or "",
        }

    def set_field(self, name, value):
        if name not in self.draft:
            raise ValidationError({name: "Field tidak dikenal"})
        if name == "amount":
            try:
                value = parse_amount(value)
            except (TypeError, ValueError):
                raise ValidationError({"amount": "Jumlah harus berupa angka"})
        elif value is None:
            value = ""
        elif not isinstance(value, str):
            raise ValidationError({name: "Harus berupa teks"})
        self.draft[name] = value
        self._entered.add(name)

    def set_fields(self, values):
        errors = {}
        for name, value in values.items():
            try:
                self.set_field(name, value)
            except ValidationError as e:
                errors.update(e.errors)
        if errors:
            raise ValidationError(errors)

    def validate(self):
        errors = {}
        if not str(self.draft["client_name"]).strip():
            errors["client_name"] = "Nama klien wajib diisi"
        if not str(self.draft["period"]).strip():
            errors["period"] = "Periode wajib diisi"
        if self.draft["type"] not in WORKSHEET_TYPES:
            errors["type"] = "Jenis pajak tidak valid"
        if self.draft["status"] not in STATUS_OPTIONS:
            errors["status"] = "Status tidak valid"
        self.errors = errors
        return not errors

    def payload(self):
        data = dict(self.draft)
        original = self.worksheet or {}
        for field in NULLABLE_TEXT_FIELDS:
            if data[field] == "" and field not in self._entered:
                data[field] = original.get(field)
        return data

    def _next_timestamp(self):
        now = self.clock()
        previous = self.worksheet.get("updated_at")
        # updated_at harus selalu maju walau jam lokal tertinggal
        if isinstance(previous, datetime) and now <= previous:
            now = previous + timedelta(microseconds=1)
        return now

    def submit(self):
        """Kirim draft ke store. Mengembalikan True bila tersimpan."""
        if self.submitting:
            return False
        if not self.validate():
            self.notify("error", "; ".join(self.errors.values()))
            return False

        self.submitting = True
        try:
            if self.is_editing:
                fields = self.payload()
                fields["updated_at"] = self._next_timestamp()
                saved = self.store.update(self.worksheet["id"], fields)
            else:
                saved = self.store.insert(self.payload())
        except StoreError as e:
            if self.mounted:
                logger.error(f"Error saving worksheet: {e}")
                self.last_error = e
                self.submitting = False
                self.notify("error", SAVE_FAILED)
            return False

        if not self.mounted:
            return True
        self.submitting = False
        self.saved = saved
        self.last_error = None
        self.notify("success", UPDATED if self.is_editing else CREATED)
        self.on_success()
        self.close()
        return True

    def close(self):
        self.is_open = False

    def teardown(self):
        self.mounted = False
