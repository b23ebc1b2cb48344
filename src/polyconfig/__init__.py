"""polyconfig: a multi-format configuration file store.

Loads a config file in one of several encodings (properties, JSON, YAML,
pickled Python, newline-separated lists), fills in defaults, serves flat
and dotted-path lookups, and saves back in the same encoding.

Example usage:
    from polyconfig import ConfigStore, Encoding

    store = ConfigStore("app.json", defaults={"db": {"host": "localhost"}})
    host = store.get_nested("db.host")

    # Force an encoding regardless of the file name
    hosts = ConfigStore("allowed_hosts", Encoding.ENUM)
    if hosts.exists("example.org"):
        ...
"""

__version__ = "0.1.0"

from polyconfig.codecs import (
    Codec,
    EnumListCodec,
    JsonCodec,
    PropertiesCodec,
    SerializedCodec,
    YamlCodec,
    get_codec,
    register_codec,
)
from polyconfig.encoding import FORMATS, Encoding, detect_encoding, resolve_encoding
from polyconfig.errors import (
    CodecError,
    ConfigStoreError,
    EncodingUnresolvedError,
    SaveError,
)
from polyconfig.filesystem import FileSystem, LocalFileSystem, MemoryFileSystem
from polyconfig.logging import get_logger, setup_logging
from polyconfig.merge import fill_defaults
from polyconfig.schema import LoggingConfig
from polyconfig.store import ConfigStore, load_config

__all__ = [
    # Main API
    "ConfigStore",
    "load_config",
    # Encodings
    "Encoding",
    "FORMATS",
    "detect_encoding",
    "resolve_encoding",
    # Codecs
    "Codec",
    "PropertiesCodec",
    "JsonCodec",
    "YamlCodec",
    "SerializedCodec",
    "EnumListCodec",
    "get_codec",
    "register_codec",
    # Defaults
    "fill_defaults",
    # Collaborators
    "FileSystem",
    "LocalFileSystem",
    "MemoryFileSystem",
    # Errors
    "ConfigStoreError",
    "EncodingUnresolvedError",
    "CodecError",
    "SaveError",
    # Logging
    "LoggingConfig",
    "setup_logging",
    "get_logger",
]
