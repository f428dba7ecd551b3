"""Per-capture data objects passed between the pipeline steps."""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Union


class _Placeholder:
    """Marker for a field that is deliberately not applicable to an entry."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __str__(self) -> str:
        return ""

    def __repr__(self) -> str:
        return "PLACEHOLDER"


PLACEHOLDER = _Placeholder()

FieldValue = Union[str, _Placeholder]


class FieldStore:
    """
    Mutable record of bibliographic fields.

    A field is either unset, a placeholder (explicitly "not applicable for
    this entry") or a concrete string. Placeholders count as defined, so the
    generic extractors leave them alone, but they render as empty output.
    """

    def __init__(self, initial: Optional[Mapping[str, Any]] = None):
        self._fields: Dict[str, FieldValue] = {}
        if initial:
            self.update(initial)

    @staticmethod
    def _normalize(value: Any) -> Optional[FieldValue]:
        if value is None or value is PLACEHOLDER:
            return value
        value = str(value).strip()
        return value or None

    def get(self, name: str, include_placeholder: bool = False) -> Optional[FieldValue]:
        """Return the concrete value, ``PLACEHOLDER`` (only when asked for) or None."""
        value = self._fields.get(name)
        if value is PLACEHOLDER and not include_placeholder:
            return None
        return value

    def set(self, name: str, value: Any) -> None:
        """Always overwrite ``name``. Empty values unset the field."""
        value = self._normalize(value)
        if value is None:
            self._fields.pop(name, None)
        else:
            self._fields[name] = value

    def set_placeholder(self, name: str) -> None:
        self._fields[name] = PLACEHOLDER

    def is_defined(self, name: str) -> bool:
        """True when the field is concrete or a placeholder."""
        return name in self._fields

    def is_placeholder(self, name: str) -> bool:
        return self._fields.get(name) is PLACEHOLDER

    def fill(self, name: str, value: Any) -> bool:
        """Set ``name`` only if it is still undefined. Returns whether it was set."""
        if self.is_defined(name):
            return False
        value = self._normalize(value)
        if value is None:
            return False
        self._fields[name] = value
        return True

    def undefined(self, names: Iterable[str]) -> List[str]:
        return [name for name in names if not self.is_defined(name)]

    def update(self, values: Mapping[str, Any]) -> None:
        for name, value in values.items():
            self.set(name, value)

    def as_dict(self) -> Dict[str, str]:
        """Concrete values only, placeholders dropped."""
        return {name: value for name, value in self._fields.items() if value is not PLACEHOLDER}

    def __contains__(self, name: object) -> bool:
        return name in self._fields

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._fields))

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"FieldStore({self._fields!r})"


@dataclass(frozen=True)
class CaptureContext:
    """
    Immutable input of one capture.

    ``query`` carries arbitrary capture parameters. The keys understood by
    the pipeline are ``html_path`` (pre-fetched page content), ``feed_entry``
    (feed reader metadata), ``notify_channel`` (an object with a
    ``notify(message, severity)`` method) and ``silent``.
    """

    link: str
    title: str = ""
    query: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "query", MappingProxyType(dict(self.query)))

    @property
    def html_path(self) -> Optional[str]:
        return self.query.get("html_path")

    @property
    def feed_entry(self) -> Any:
        return self.query.get("feed_entry")

    @property
    def notify_channel(self) -> Any:
        return self.query.get("notify_channel")

    @property
    def silent(self) -> bool:
        return bool(self.query.get("silent", False))

    def __str__(self) -> str:
        return f"Capture({self.link})"


@dataclass(frozen=True)
class BibRecord:
    """Formatted record produced by a successful capture."""

    key: str
    text: str

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class MatchReference:
    """Location of an existing record in the persisted corpus."""

    path: str
    line: int
    text: str = ""

    def __str__(self) -> str:
        return f"{self.path}:{self.line}"


class StepStatus(Enum):
    """Result of a single extraction step."""
    CONTINUE = "continue"
    FINISH = "finish"
    FAILED = "failed"


@dataclass
class StepOutcome:
    status: StepStatus
    error: Optional["CaptureError"] = None  # noqa: F821

    @classmethod
    def proceed(cls) -> "StepOutcome":
        return cls(StepStatus.CONTINUE)

    @classmethod
    def finish(cls) -> "StepOutcome":
        return cls(StepStatus.FINISH)

    @classmethod
    def fail(cls, error: "CaptureError") -> "StepOutcome":  # noqa: F821
        return cls(StepStatus.FAILED, error)

    @property
    def is_finished(self) -> bool:
        return self.status == StepStatus.FINISH

    @property
    def is_failed(self) -> bool:
        return self.status == StepStatus.FAILED
