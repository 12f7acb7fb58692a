# backend/lembar_kerja/worksheets/routes.py

from flask import Blueprint, request, jsonify, current_app

from ..errors import NotFound, ValidationError
from ..store import SqlAlchemyWorksheetStore
from .controllers import (
    ALL,
    LIST_PATH,
    SAVE_FAILED,
    WorksheetDetailController,
    WorksheetListController,
)
from .utils import form_options, serialize_worksheet

worksheets_bp = Blueprint('worksheets', __name__, url_prefix='/api/worksheets')


class Feedback:
    """Menampung toast dan navigasi dari controller untuk dibalas sebagai JSON."""

    def __init__(self):
        self.messages = []
        self.redirect = None

    def notify(self, category, message):
        current_app.logger.info(f"[{category}] {message}")
        self.messages.append({"category": category, "message": message})

    def navigate(self, path):
        self.redirect = path

    def last_message(self, default=None):
        return self.messages[-1]["message"] if self.messages else default


def _error_status(error):
    return 404 if isinstance(error, NotFound) else 502


def list_controller_from_args(args, feedback):
    """Buat dan mount controller daftar dengan filter dari query string."""
    view = WorksheetListController(SqlAlchemyWorksheetStore(), feedback.notify, feedback.navigate)
    view.status_filter = args.get('status') or ALL
    view.type_filter = args.get('type') or ALL
    view.search = args.get('q', '').strip()
    view.mount()
    return view


def _json_body():
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else None


def _save(form, data, feedback, success_status):
    try:
        form.set_fields({k: v for k, v in data.items() if k in form.draft})
    except ValidationError as e:
        return jsonify(error="Isian tidak valid", errors=e.errors), 400

    if form.submit():
        return jsonify(message=feedback.last_message(), worksheet=serialize_worksheet(form.saved)), success_status
    if form.errors:
        return jsonify(error="Isian tidak valid", errors=form.errors), 400
    return jsonify(error=SAVE_FAILED), _error_status(form.last_error)


@worksheets_bp.route('', methods=['GET'])
def list_worksheets():
    feedback = Feedback()
    view = list_controller_from_args(request.args, feedback)
    if view.last_error is not None:
        return jsonify(error=feedback.last_message()), 502

    groups = view.groups()
    selected = request.args.get('view') or ALL
    if selected not in groups:
        return jsonify(error=f"Tampilan '{selected}' tidak valid"), 400

    return jsonify(
        worksheets=[serialize_worksheet(w) for w in groups[selected]],
        total=len(view.worksheets),
        stats=view.stats(),
        groups={name: len(items) for name, items in groups.items()},
        message=view.empty_message(),
    )


@worksheets_bp.route('/meta', methods=['GET'])
def worksheet_meta():
    return jsonify(form_options())


@worksheets_bp.route('/<string:worksheet_id>', methods=['GET'])
def get_worksheet(worksheet_id):
    feedback = Feedback()
    detail = WorksheetDetailController(SqlAlchemyWorksheetStore(), worksheet_id, feedback.notify, feedback.navigate)
    if not detail.mount():
        return jsonify(error=feedback.last_message(), redirect=feedback.redirect), _error_status(detail.last_error)
    return jsonify(worksheet=serialize_worksheet(detail.worksheet))


@worksheets_bp.route('', methods=['POST'])
def create_worksheet():
    data = _json_body()
    if data is None:
        return jsonify(error="Input harus berupa objek JSON"), 400

    feedback = Feedback()
    view = WorksheetListController(SqlAlchemyWorksheetStore(), feedback.notify, feedback.navigate)
    form = view.create_form()
    return _save(form, data, feedback, 201)


@worksheets_bp.route('/<string:worksheet_id>', methods=['PUT'])
def update_worksheet(worksheet_id):
    data = _json_body()
    if data is None:
        return jsonify(error="Input harus berupa objek JSON"), 400

    feedback = Feedback()
    detail = WorksheetDetailController(SqlAlchemyWorksheetStore(), worksheet_id, feedback.notify, feedback.navigate)
    if not detail.mount():
        return jsonify(error=feedback.last_message(), redirect=feedback.redirect), _error_status(detail.last_error)
    return _save(detail.edit_form(), data, feedback, 200)


@worksheets_bp.route('/<string:worksheet_id>', methods=['DELETE'])
def delete_worksheet(worksheet_id):
    feedback = Feedback()
    detail = WorksheetDetailController(SqlAlchemyWorksheetStore(), worksheet_id, feedback.notify, feedback.navigate)
    if not detail.mount():
        return jsonify(error=feedback.last_message(), redirect=feedback.redirect), _error_status(detail.last_error)
    if not detail.delete():
        return jsonify(error=feedback.last_message()), _error_status(detail.last_error)
    return jsonify(message=feedback.last_message(), redirect=feedback.redirect or LIST_PATH), 200
