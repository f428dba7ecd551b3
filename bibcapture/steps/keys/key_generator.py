import hashlib
from typing import Callable, List, Optional

from bibcapture.common.regex_patterns import KEY_UNSAFE_CHARS_PATTERN, strip_scheme
from bibcapture.enums import HashAlgorithm
from bibcapture.errors import KeyGenerationError
from bibcapture.logging import get_logger
from bibcapture.model.capture import FieldStore


def normalize_url_for_key(url: str) -> str:
    """
    Strip the scheme and ``www.``, then replace anything outside
    ``[A-Za-z0-9/.]`` with ``-``.
    """
    return KEY_UNSAFE_CHARS_PATTERN.sub("-", strip_scheme(url))


class KeyGenerator:
    """
    Derive a deterministic record key.

    Strategies are tried in order: a hash of the DOI, then a hash of the
    normalized URL. Capturing the same resource twice yields the same key.
    """

    def __init__(self, algorithm: str = HashAlgorithm.MD5.value):
        self.algorithm = HashAlgorithm(algorithm).value
        self.logger = get_logger(self.__class__.__name__)
        self.strategies: List[Callable[[FieldStore], Optional[str]]] = [
            self.from_doi,
            self.from_url,
        ]

    def _hash(self, value: str) -> str:
        return hashlib.new(self.algorithm, value.encode("utf-8")).hexdigest()

    def from_doi(self, fields: FieldStore) -> Optional[str]:
        doi = fields.get("doi")
        return self._hash(doi) if doi else None

    def from_url(self, fields: FieldStore) -> Optional[str]:
        url = fields.get("url")
        return self._hash(normalize_url_for_key(url)) if url else None

    def generate(self, fields: FieldStore) -> str:
        """Return the key for ``fields`` and store it as the ``key`` field."""
        for strategy in self.strategies:
            key = strategy(fields)
            if key:
                self.logger.debug(f"Generated key {key} using {strategy.__name__}")
                fields.set("key", key)
                return key
        raise KeyGenerationError("Neither a DOI nor a URL is available to generate a key")
