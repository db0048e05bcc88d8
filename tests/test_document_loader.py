import json

import pytest

from backend.document_loader import (
    extract_content_from_item,
    extract_metadata_from_item,
    load_documents,
)


def test_content_renders_allowed_fields_in_order():
    item = {
        "produk": "Keripik tempe pedas",
        "kota": "Bandung",
        "nama": "Keripik Tempe Bu Sri",
        "kategori": "Makanan",
    }

    assert extract_content_from_item(item) == (
        "nama: Keripik Tempe Bu Sri\n"
        "kategori: Makanan\n"
        "produk: Keripik tempe pedas"
    )


def test_content_skips_empty_and_non_string_values():
    item = {"nama": "Kopi Gayo", "deskripsi": "", "type": 3, "info": None}

    assert extract_content_from_item(item) == "nama: Kopi Gayo"


def test_content_falls_back_to_pretty_json():
    item = {"omzet": 12000000, "pemilik": "Siti Aminah"}

    assert extract_content_from_item(item) == json.dumps(item, indent=2, ensure_ascii=False)


def test_metadata_copies_present_fields_only():
    item = {"id": "UMKM-9", "kota": "Medan", "provinsi": "", "nama": "Bika Ambon"}

    assert extract_metadata_from_item(item) == {"id": "UMKM-9", "kota": "Medan"}


def test_load_documents_from_array(dataset_path):
    documents = load_documents(dataset_path)

    assert len(documents) == 3
    first = documents[0]
    assert first.page_content.startswith("nama: Keripik Tempe Bu Sri")
    assert first.metadata == {
        "source": "dataset_umkm.json",
        "index": 0,
        "id": "UMKM-001",
        "kategori": "Makanan",
        "kota": "Bandung",
    }
    assert documents[2].metadata == {"source": "dataset_umkm.json", "index": 2}
    assert '"omzet": 12000000' in documents[2].page_content


def test_load_documents_from_single_object(tmp_path):
    path = tmp_path / "single.json"
    path.write_text(json.dumps({"nama": "Warung Bu Tini", "city": "Solo"}), encoding="utf-8")

    documents = load_documents(str(path), source="dataset_umkm.json")

    assert len(documents) == 1
    assert documents[0].page_content == "nama: Warung Bu Tini"
    assert documents[0].metadata == {"source": "dataset_umkm.json", "index": 0, "city": "Solo"}


def test_load_documents_handles_non_object_records(tmp_path):
    path = tmp_path / "mixed.json"
    path.write_text(json.dumps(["toko kelontong"]), encoding="utf-8")

    documents = load_documents(str(path))

    assert documents[0].page_content == '"toko kelontong"'
    assert documents[0].metadata == {"source": "mixed.json", "index": 0}


def test_load_documents_missing_file(tmp_path):
    missing = tmp_path / "nope.json"

    with pytest.raises(FileNotFoundError, match="Dataset file not found"):
        load_documents(str(missing))


def test_load_documents_invalid_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(json.JSONDecodeError):
        load_documents(str(path))
