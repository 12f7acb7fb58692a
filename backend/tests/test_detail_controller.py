"""Controller detail: muat, edit, hapus."""
import pytest

from fakes import InMemoryWorksheetStore, Recorder, make_worksheet
from lembar_kerja.worksheets.controllers import (
    DELETE_FAILED,
    DELETED,
    LIST_PATH,
    LOAD_FAILED,
    WorksheetDetailController,
    WorksheetListController,
)


@pytest.fixture
def store():
    return InMemoryWorksheetStore([make_worksheet(1), make_worksheet(2, client_name="PT Maju")])


@pytest.fixture
def recorder():
    return Recorder()


def _detail(store, recorder, worksheet_id="ws-2"):
    return WorksheetDetailController(store, worksheet_id, recorder.notify, recorder.navigate)


def test_mount_loads_single_record(store, recorder):
    detail = _detail(store, recorder)

    assert detail.mount() is True
    assert detail.worksheet["client_name"] == "PT Maju"
    assert not detail.loading
    assert recorder.messages == []
    assert recorder.paths == []


def test_missing_record_navigates_back_to_list(store, recorder):
    detail = _detail(store, recorder, "tidak-ada")

    assert detail.mount() is False
    assert detail.worksheet is None
    assert recorder.messages == [("error", LOAD_FAILED)]
    assert recorder.paths == [LIST_PATH]


def test_transport_failure_navigates_back_to_list(store, recorder):
    store.failing.add("get_by_id")
    detail = _detail(store, recorder)

    assert detail.mount() is False
    assert recorder.paths == [LIST_PATH]


def test_delete_removes_record_and_returns_to_list(store, recorder):
    detail = _detail(store, recorder)
    detail.mount()

    assert detail.delete() is True
    assert recorder.messages == [("success", DELETED)]
    assert recorder.paths == [LIST_PATH]

    view = WorksheetListController(store)
    view.mount()
    assert [w["id"] for w in view.worksheets] == ["ws-1"]


def test_failed_delete_stays_on_page(store, recorder):
    detail = _detail(store, recorder)
    detail.mount()
    store.failing.add("delete")

    assert detail.delete() is False
    assert detail.worksheet["id"] == "ws-2"
    assert "ws-2" in store.rows
    assert recorder.messages == [("error", DELETE_FAILED)]
    assert recorder.paths == []


def test_delete_completing_after_teardown_is_silent(store, recorder):
    detail = _detail(store, recorder)
    detail.mount()
    store.before_return = lambda op: detail.teardown()

    assert detail.delete() is True
    assert recorder.messages == []
    assert recorder.paths == []


def test_edit_form_is_prefilled_and_refreshes_detail(store, recorder):
    detail = _detail(store, recorder)
    detail.mount()
    form = detail.edit_form()

    assert form.is_editing
    assert form.draft["client_name"] == "PT Maju"

    form.set_field("status", "Menunggu Review")
    assert form.submit()
    assert detail.worksheet["status"] == "Menunggu Review"
    assert store.calls.count("get_by_id") == 2


def test_edit_form_requires_loaded_record(store, recorder):
    detail = _detail(store, recorder)
    with pytest.raises(RuntimeError):
        detail.edit_form()


def test_edit_completing_after_teardown_is_silent(store, recorder):
    detail = _detail(store, recorder)
    detail.mount()
    form = detail.edit_form()
    form.set_field("status", "Selesai")
    store.before_return = lambda op: detail.teardown()

    assert form.submit() is True
    assert recorder.messages == []
    assert recorder.paths == []
    assert detail.worksheet["status"] != "Selesai"
    assert store.calls.count("get_by_id") == 1
