"""Tests for local document storage."""
import uuid

import pytest

from hoa_intake.core.exceptions import StorageError
from hoa_intake.services.document_storage import LocalDocumentStorage


def test_upload_writes_under_association_folder(storage):
    association_id = uuid.uuid4()

    stored = storage.upload(association_id, "AcmeHOA/Unit 5/lease (final).pdf", b"data")

    folder, name = stored.path.split("/")
    assert folder == str(association_id)
    assert name.endswith("_AcmeHOA_Unit_5_lease__final_.pdf")
    assert stored.url == f"http://files.test/documents/{stored.path}"
    assert (storage.root / stored.path).read_bytes() == b"data"


def test_same_name_twice_gets_distinct_paths(storage):
    association_id = uuid.uuid4()

    first = storage.upload(association_id, "lease.pdf", b"1")
    second = storage.upload(association_id, "lease.pdf", b"2")

    assert first.path != second.path


def test_unwritable_root_raises_storage_error(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    storage = LocalDocumentStorage(blocker, "http://files.test")

    with pytest.raises(StorageError, match="Storage upload failed"):
        storage.upload(uuid.uuid4(), "lease.pdf", b"x")


def test_delete(storage):
    stored = storage.upload(uuid.uuid4(), "lease.pdf", b"x")

    storage.delete(stored.path)
    storage.delete(stored.path)

    assert not (storage.root / stored.path).exists()
