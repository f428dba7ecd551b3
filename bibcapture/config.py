from pathlib import Path
from typing import Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, validator

from bibcapture.common.regex_patterns import FIELD_PATTERNS
from bibcapture.enums import DoiRecordMode, HashAlgorithm, SearchBackend


class FetchConfig(BaseModel):
    timeout: Optional[float] = None  # no timeout unless configured
    user_agent: str = "Mozilla/5.0 (X11; Linux x86_64) bibcapture/0.1"


class CorpusConfig(BaseModel):
    paths: List[str] = []
    suffixes: List[str] = [".org", ".bib"]
    backend: str = "index"  # index | ripgrep

    @validator("backend")
    def check_backend(cls, v):
        allowed = {b.value for b in SearchBackend}
        if v not in allowed:
            raise ValueError(f"Unsupported search backend: {v}. Allowed: {allowed}")
        return v

    def get_paths(self) -> List[Path]:
        return [Path(p).expanduser() for p in self.paths]


class CaptureConfig(BaseModel):
    default_type: str = "misc"
    key_hash: str = "md5"
    doi_record_mode: str = "verbatim"  # verbatim | reformat
    site_extractors: List[str] = ["forge", "youtube", "habr", "telegram"]
    field_patterns: Dict[str, List[str]] = Field(default_factory=lambda: {k: list(v) for k, v in FIELD_PATTERNS.items()})
    warn_on_parse_miss: bool = True
    silent: bool = False
    debug: bool = False
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    corpus: CorpusConfig = Field(default_factory=CorpusConfig)

    @validator("key_hash")
    def check_key_hash(cls, v):
        allowed = {h.value for h in HashAlgorithm}
        if v not in allowed:
            raise ValueError(f"Unsupported key hash: {v}. Allowed: {allowed}")
        return v

    @validator("doi_record_mode")
    def check_doi_record_mode(cls, v):
        allowed = {m.value for m in DoiRecordMode}
        if v not in allowed:
            raise ValueError(f"Unsupported DOI record mode: {v}. Allowed: {allowed}")
        return v

    @validator("site_extractors")
    def check_site_extractors(cls, v):
        allowed = {"forge", "youtube", "habr", "telegram"}
        for site in v:
            if site not in allowed:
                raise ValueError(f"Unsupported site extractor: {site}. Allowed: {allowed}")
        return v

def load_config(path: str) -> CaptureConfig:
    with open(path) as f:
        raw = yaml.safe_load(f) or {}
    return CaptureConfig(**raw.get("capture", {}))  # unpack
