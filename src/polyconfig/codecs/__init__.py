"""Codecs for the supported on-disk encodings.

Importing this package registers one codec per encoding:

    PROPERTIES  -> PropertiesCodec
    JSON        -> JsonCodec
    YAML        -> YamlCodec
    SERIALIZED  -> SerializedCodec
    ENUM        -> EnumListCodec

EXPORT is reserved and deliberately left without a codec.
"""

from polyconfig.codecs.base import (
    Codec,
    get_codec,
    register_codec,
    registered_encodings,
    unregister_codec,
)
from polyconfig.codecs.enum_list import EnumListCodec
from polyconfig.codecs.json_codec import JsonCodec
from polyconfig.codecs.properties import PropertiesCodec
from polyconfig.codecs.serialized import SerializedCodec
from polyconfig.codecs.yaml_codec import YamlCodec, normalize_yaml_keys

for _codec in (
    PropertiesCodec(),
    JsonCodec(),
    YamlCodec(),
    SerializedCodec(),
    EnumListCodec(),
):
    register_codec(_codec)
del _codec

__all__ = [
    "Codec",
    "get_codec",
    "register_codec",
    "unregister_codec",
    "registered_encodings",
    "PropertiesCodec",
    "JsonCodec",
    "YamlCodec",
    "SerializedCodec",
    "EnumListCodec",
    "normalize_yaml_keys",
]
