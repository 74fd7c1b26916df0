import pytest

from gmaps_enricher.core.store import RecordBusyError, RecordStore, UnknownRecordError
from gmaps_enricher.models import BusinessRecord


def test_record_complete_after_last_release():
    store = RecordStore()
    record = BusinessRecord(title="Acme")
    handle = store.add(record)
    store.retain(handle)

    assert store.release(handle) is None
    assert handle in store
    assert store.release(handle) is record
    assert handle not in store
    assert len(store) == 0


def test_checkout_is_exclusive():
    store = RecordStore()
    handle = store.add(BusinessRecord())

    with store.checkout(handle) as record:
        record.title = "Acme"
        with pytest.raises(RecordBusyError):
            with store.checkout(handle):
                pass

    with store.checkout(handle) as record:
        assert record.title == "Acme"


def test_checkout_released_after_error():
    store = RecordStore()
    handle = store.add(BusinessRecord())

    with pytest.raises(ValueError):
        with store.checkout(handle):
            raise ValueError("boom")

    with store.checkout(handle):
        pass


def test_unknown_handle():
    store = RecordStore()
    with pytest.raises(UnknownRecordError):
        store.get("missing")
    with pytest.raises(UnknownRecordError):
        store.release("missing")
