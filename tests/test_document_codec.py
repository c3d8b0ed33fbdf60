from types import SimpleNamespace

from locapilot.services.document_codec import (
    DEFAULT_MIME_TYPE,
    decode_data_url,
    deserialize_documents,
    encode_data_url,
    serialize_documents,
)


def test_bytes_are_encoded_as_data_url():
    assert encode_data_url(b"ciao", "text/plain") == "data:text/plain;base64,Y2lhbw=="


def test_missing_mime_type_falls_back_to_default():
    assert encode_data_url(b"x", None).startswith(f"data:{DEFAULT_MIME_TYPE};base64,")


def test_already_encoded_strings_pass_through():
    assert encode_data_url("data:text/plain;base64,Y2lhbw==", "image/png") == "data:text/plain;base64,Y2lhbw=="


def test_unserializable_payload_becomes_none():
    assert encode_data_url(None, "text/plain") is None
    assert encode_data_url(12345, "text/plain") is None


def test_decode_rejects_invalid_input():
    assert decode_data_url("Y2lhbw==") is None
    assert decode_data_url("data:text/plain;base64,***") is None
    assert decode_data_url(None) is None
    assert decode_data_url("data:text/plain;base64,Y2lhbw==") == ("text/plain", b"ciao")


def test_serialize_documents_excludes_raw_bytes():
    document = SimpleNamespace(
        data=b"ciao",
        mime_type="text/plain",
        to_dict=lambda exclude=(): {"id": 1, "name": "nota.txt", "mimeType": "text/plain"},
    )

    rows = serialize_documents([document])

    assert rows == [
        {"id": 1, "name": "nota.txt", "mimeType": "text/plain", "data": "data:text/plain;base64,Y2lhbw=="}
    ]


def test_deserialize_documents_realigns_mime_and_size():
    rows = deserialize_documents(
        [
            {"id": 1, "mimeType": "application/pdf", "size": 999, "data": "data:text/plain;base64,Y2lhbw=="},
            {"id": 2, "mimeType": "image/png", "size": 10, "data": None},
        ]
    )

    assert rows[0]["data"] == b"ciao"
    assert rows[0]["mimeType"] == "text/plain"
    assert rows[0]["size"] == 4
    assert rows[1]["data"] is None
    assert rows[1]["mimeType"] == "image/png"
