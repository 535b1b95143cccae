# Protobuf messages exchanged with the WebAPK build service.
"""WebAPK wire messages.

The message classes are generated at import time from a descriptor that
mirrors ``webapk.proto``; no ``protoc`` step is needed.
"""

from __future__ import annotations

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory
from google.protobuf.message import DecodeError

from webapk_builder.errors import BuildResponseDecodeFailed

_F = descriptor_pb2.FieldDescriptorProto
_PACKAGE = "webapk"

# (name, number, type, label, type_name)
_MESSAGES: dict[str, list[tuple[str, int, int, int, str | None]]] = {
    "Image": [
        ("src", 1, _F.TYPE_STRING, _F.LABEL_OPTIONAL, None),
        ("hash", 5, _F.TYPE_STRING, _F.LABEL_OPTIONAL, None),
        ("image_data", 6, _F.TYPE_BYTES, _F.LABEL_OPTIONAL, None),
        ("usages", 8, _F.TYPE_ENUM, _F.LABEL_REPEATED, ".webapk.Image.Usage"),
    ],
    "WebAppManifest": [
        ("name", 1, _F.TYPE_STRING, _F.LABEL_OPTIONAL, None),
        ("short_name", 2, _F.TYPE_STRING, _F.LABEL_OPTIONAL, None),
        ("start_url", 4, _F.TYPE_STRING, _F.LABEL_OPTIONAL, None),
        ("scopes", 5, _F.TYPE_STRING, _F.LABEL_REPEATED, None),
        ("icons", 6, _F.TYPE_MESSAGE, _F.LABEL_REPEATED, ".webapk.Image"),
        ("orientation", 9, _F.TYPE_STRING, _F.LABEL_OPTIONAL, None),
        ("display_mode", 10, _F.TYPE_STRING, _F.LABEL_OPTIONAL, None),
        ("theme_color", 11, _F.TYPE_INT64, _F.LABEL_OPTIONAL, None),
        ("background_color", 12, _F.TYPE_INT64, _F.LABEL_OPTIONAL, None),
    ],
    "WebApk": [
        ("package_name", 1, _F.TYPE_STRING, _F.LABEL_OPTIONAL, None),
        ("version", 2, _F.TYPE_STRING, _F.LABEL_OPTIONAL, None),
        ("manifest_url", 3, _F.TYPE_STRING, _F.LABEL_OPTIONAL, None),
        ("requester_application_package", 5, _F.TYPE_STRING, _F.LABEL_OPTIONAL, None),
        ("requester_application_version", 6, _F.TYPE_STRING, _F.LABEL_OPTIONAL, None),
        ("manifest", 7, _F.TYPE_MESSAGE, _F.LABEL_OPTIONAL, ".webapk.WebAppManifest"),
        ("android_abi", 8, _F.TYPE_STRING, _F.LABEL_OPTIONAL, None),
        ("stale_manifest", 9, _F.TYPE_BOOL, _F.LABEL_OPTIONAL, None),
        ("update_reason", 10, _F.TYPE_STRING, _F.LABEL_OPTIONAL, None),
    ],
    "WebApkResponse": [
        ("package_name", 1, _F.TYPE_STRING, _F.LABEL_OPTIONAL, None),
        ("version", 2, _F.TYPE_STRING, _F.LABEL_OPTIONAL, None),
        ("token", 6, _F.TYPE_STRING, _F.LABEL_OPTIONAL, None),
    ],
}

_IMAGE_USAGES = (("PRIMARY_ICON", 1), ("BADGE_ICON", 2), ("SPLASH_ICON", 3))

PRIMARY_ICON = 1


def _build_file() -> descriptor_pb2.FileDescriptorProto:
    file_proto = descriptor_pb2.FileDescriptorProto(
        name="webapk.proto", package=_PACKAGE, syntax="proto2"
    )
    for message_name, fields in _MESSAGES.items():
        message = file_proto.message_type.add(name=message_name)
        for name, number, field_type, label, type_name in fields:
            field = message.field.add(name=name, number=number, type=field_type, label=label)
            if type_name:
                field.type_name = type_name
        if message_name == "Image":
            usage = message.enum_type.add(name="Usage")
            for value_name, value_number in _IMAGE_USAGES:
                usage.value.add(name=value_name, number=value_number)
    return file_proto


_POOL = descriptor_pool.DescriptorPool()
_POOL.AddSerializedFile(_build_file().SerializeToString())


def _message_class(name: str) -> type:
    return message_factory.GetMessageClass(_POOL.FindMessageTypeByName(f"{_PACKAGE}.{name}"))


Image = _message_class("Image")
WebAppManifest = _message_class("WebAppManifest")
WebApk = _message_class("WebApk")
WebApkResponse = _message_class("WebApkResponse")


def encode_request(request) -> bytes:
    return request.SerializeToString()


def decode_response(payload: bytes):
    """Parse a ``WebApkResponse``; incomplete replies are rejected."""
    response = WebApkResponse()
    try:
        response.ParseFromString(payload)
    except DecodeError as exc:
        raise BuildResponseDecodeFailed(f"Could not decode build response: {exc}") from exc
    if not response.token or not response.package_name:
        raise BuildResponseDecodeFailed(
            "Build response is missing the package name or download token"
        )
    return response


__all__ = [
    "Image",
    "WebAppManifest",
    "WebApk",
    "WebApkResponse",
    "PRIMARY_ICON",
    "encode_request",
    "decode_response",
]
