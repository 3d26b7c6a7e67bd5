"""
DocumentRegistry + LocalFileStorage tests
"""

import os

import pytest

from admissions_portal.core.errors import NotFound, Unauthorized
from admissions_portal.models import DocumentStatus, DocumentType
from admissions_portal.services.file_storage import LocalFileStorage


def test_upload_records_metadata(services):
    doc = services.documents.upload("s1", DocumentType.certificate, "s1/abc.pdf", "cert.pdf")
    assert doc.status == DocumentStatus.pending
    assert doc.storage_ref == "s1/abc.pdf"
    assert services.documents.get(doc.id).file_name == "cert.pdf"


def test_upload_rejects_unknown_type(services):
    with pytest.raises(ValueError):
        services.documents.upload("s1", "passport_photo", "s1/x.png")


def test_list_by_student_only_own(services):
    services.documents.upload("s1", DocumentType.id_copy, "s1/a.pdf")
    services.documents.upload("s1", DocumentType.certificate, "s1/b.pdf")
    services.documents.upload("s2", DocumentType.certificate, "s2/c.pdf")
    assert {d.type for d in services.documents.list_by_student("s1")} == {
        DocumentType.id_copy, DocumentType.certificate
    }


def test_only_owner_can_delete(services):
    doc = services.documents.upload("s1", DocumentType.certificate, "s1/abc.pdf")
    with pytest.raises(Unauthorized):
        services.documents.delete(doc.id, "s2")
    assert services.documents.get(doc.id)

    services.documents.delete(doc.id, "s1")
    with pytest.raises(NotFound):
        services.documents.get(doc.id)
    with pytest.raises(NotFound):
        services.documents.delete(doc.id, "s1")


def test_delete_removes_stored_bytes(services):
    ref = services.file_storage.save("s1", "transcript.pdf", b"%PDF-1.4")
    path = os.path.join(services.file_storage.root, ref)
    assert os.path.exists(path)

    doc = services.documents.upload("s1", DocumentType.high_school_transcript, ref, "transcript.pdf")
    services.documents.delete(doc.id, "s1")
    assert not os.path.exists(path)


def test_review_status(services):
    doc = services.documents.upload("s1", DocumentType.certificate, "s1/abc.pdf")
    assert services.documents.set_status(doc.id, "approved").status == DocumentStatus.approved
    with pytest.raises(NotFound):
        services.documents.set_status("missing", "approved")


def test_document_types_cover_transcripts(services):
    values = {t["value"] for t in services.documents.document_types()}
    assert {"high_school_transcript", "certificate", "other"} <= values


def test_local_storage_refuses_paths_outside_root(tmp_path):
    storage = LocalFileStorage(str(tmp_path / "uploads"))
    outside = tmp_path / "secret.txt"
    outside.write_text("keep me")
    assert storage.delete("../secret.txt") is False
    assert outside.exists()


@pytest.mark.parametrize("owner", ["../escaped", "s1/../../escaped", ".."])
def test_local_storage_save_stays_inside_root(tmp_path, owner):
    storage = LocalFileStorage(str(tmp_path / "uploads"))
    with pytest.raises(Unauthorized):
        storage.save(owner, "x.pdf", b"x")
    assert not (tmp_path / "escaped").exists()
    assert list(tmp_path.glob("*.pdf")) == []
