from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

from can_browser.validation.errors import ValidationIssue

DEFAULT_VEHICLE = "Model 3"
DEFAULT_FIRMWARE = "2026.2"
BASE_LIBRARY = "libQtCarCANData.so"


# -------------------------------------------------------------------------
# Tolerant field coercion
# -------------------------------------------------------------------------
def _text(value: Any) -> str:
    """Render a raw JSON scalar as text; absent values become ''."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _int(value: Any) -> Optional[int]:
    """Coerce a raw JSON value to int, or None if it is not numeric."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        try:
            return int(value.strip(), 0)
        except ValueError:
            return None
    return None


def _list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


class FrameKey(NamedTuple):
    """
    Composite identity of a frame within a loaded dataset.

    The string `token` form ("bus|id|address|name") is what selection state
    and the UI carry around.
    """
    bus_name: str
    bus_id: str
    address_dec: int
    frame_name: str

    @property
    def token(self) -> str:
        return f"{self.bus_name}|{self.bus_id}|{self.address_dec}|{self.frame_name}"


def signal_key(frame_token: str, signal_index: int) -> str:
    """Expansion key for one signal row: '<frame-token>:<signal_index>'."""
    return f"{frame_token}:{signal_index}"


# -------------------------------------------------------------------------
# Raw records
#
# eq=False keeps identity hashing, so frames and signals can key the
# parallel derived-metadata mappings even when two records carry equal fields.
# -------------------------------------------------------------------------
@dataclass(frozen=True, eq=False)
class PossibleValue:
    value_dec: str
    value_hex: str
    label: Optional[str]

    @classmethod
    def from_dict(cls, raw: Any) -> PossibleValue:
        data = raw if isinstance(raw, dict) else {}
        label = data.get("label")
        return cls(
            value_dec=_text(data.get("value_dec")),
            value_hex=_text(data.get("value_hex")),
            label=None if label is None else _text(label),
        )


@dataclass(frozen=True, eq=False)
class Signal:
    signal_index: int
    signal_name: str
    enum_map_symbol: str = ""
    possible_values_note: str = ""
    vapi_alias: str = ""
    vapi_source: str = ""
    possible_values: Tuple[PossibleValue, ...] = ()

    @property
    def is_enumerated(self) -> bool:
        return len(self.possible_values) > 0

    @classmethod
    def from_dict(cls, raw: Any, issues: Optional[List[ValidationIssue]] = None) -> Signal:
        if not isinstance(raw, dict):
            if issues is not None:
                issues.append(ValidationIssue("SIGNAL_NOT_OBJECT", f"Signal record is {type(raw).__name__}"))
            raw = {}

        index = _int(raw.get("signal_index"))
        if index is None:
            if issues is not None:
                issues.append(
                    ValidationIssue(
                        "SIGNAL_INDEX",
                        f"Signal {raw.get('signal_name')!r} has no numeric signal_index",
                    )
                )
            index = 0

        values = raw.get("possible_values")
        if values is not None and not isinstance(values, list) and issues is not None:
            issues.append(
                ValidationIssue(
                    "SIGNAL_VALUES",
                    f"Signal {raw.get('signal_name')!r} possible_values is not a list",
                )
            )

        return cls(
            signal_index=index,
            signal_name=_text(raw.get("signal_name")),
            enum_map_symbol=_text(raw.get("enum_map_symbol")),
            possible_values_note=_text(raw.get("possible_values_note")),
            vapi_alias=_text(raw.get("vapi_alias")),
            vapi_source=_text(raw.get("vapi_source")),
            possible_values=tuple(PossibleValue.from_dict(v) for v in _list(values)),
        )


@dataclass(frozen=True, eq=False)
class Frame:
    bus_name: str
    bus_id: str
    address_dec: int
    address_hex: str
    frame_name: str
    signals: Tuple[Signal, ...] = ()

    @property
    def key(self) -> FrameKey:
        return FrameKey(self.bus_name, self.bus_id, self.address_dec, self.frame_name)

    @property
    def bus_label(self) -> str:
        return f"{self.bus_name} ({self.bus_id})"

    @classmethod
    def from_dict(cls, raw: Any, issues: Optional[List[ValidationIssue]] = None) -> Frame:
        """
        Build a Frame from one raw JSON record.

        Missing or mistyped fields fall back to ''/0 and are reported through
        `issues` instead of raising.
        """
        if not isinstance(raw, dict):
            if issues is not None:
                issues.append(ValidationIssue("FRAME_NOT_OBJECT", f"Frame record is {type(raw).__name__}"))
            raw = {}

        address = _int(raw.get("address_dec"))
        if address is None:
            if issues is not None:
                issues.append(
                    ValidationIssue(
                        "FRAME_ADDRESS",
                        f"Frame {raw.get('frame_name')!r} has no numeric address_dec",
                    )
                )
            address = 0

        signals = raw.get("signals")
        if signals is not None and not isinstance(signals, list) and issues is not None:
            issues.append(
                ValidationIssue("FRAME_SIGNALS", f"Frame {raw.get('frame_name')!r} signals is not a list")
            )

        return cls(
            bus_name=_text(raw.get("bus_name")),
            bus_id=_text(raw.get("bus_id")),
            address_dec=address,
            address_hex=_text(raw.get("address_hex")),
            frame_name=_text(raw.get("frame_name")),
            signals=tuple(Signal.from_dict(s, issues) for s in _list(signals)),
        )


# -------------------------------------------------------------------------
# Provenance (passthrough, never used by queries)
# -------------------------------------------------------------------------
@dataclass(frozen=True)
class DatasetSource:
    vehicle: str = ""
    firmware: str = ""
    mcu: str = ""
    soc: str = ""

    @property
    def hardware(self) -> str:
        return f"{self.mcu} {self.soc}".strip()


@dataclass(frozen=True, eq=False)
class Dataset:
    """
    Root container for one decoded catalog.

    Fields:

    - frames: frames in feed order
    - dataset_source: vehicle/firmware labels, if the feed carries them
    - libraries: `sources_processed[].library` values, in feed order
    - vapi_digest_count: precomputed VAPI alias counter from the feed, if any
    - issues: malformed-record findings collected while parsing
    """
    frames: Tuple[Frame, ...]
    dataset_source: Optional[DatasetSource] = None
    libraries: Tuple[str, ...] = ()
    vapi_digest_count: Optional[int] = None
    issues: Tuple[ValidationIssue, ...] = field(default=())

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> Dataset:
        issues: List[ValidationIssue] = []

        raw_frames = payload.get("frames")
        if not isinstance(raw_frames, list):
            issues.append(ValidationIssue("DATASET_FRAMES", "Payload has no 'frames' list"))
            raw_frames = []

        frames = tuple(Frame.from_dict(f, issues) for f in raw_frames)

        source = None
        raw_source = payload.get("dataset_source")
        if isinstance(raw_source, dict):
            source = DatasetSource(
                vehicle=_text(raw_source.get("vehicle")),
                firmware=_text(raw_source.get("firmware")),
                mcu=_text(raw_source.get("mcu")),
                soc=_text(raw_source.get("soc")),
            )

        libraries = tuple(
            item["library"]
            for item in _list(payload.get("sources_processed"))
            if isinstance(item, dict) and isinstance(item.get("library"), str)
        )

        return cls(
            frames=frames,
            dataset_source=source,
            libraries=libraries,
            vapi_digest_count=_digest_count(payload.get("vapi_digest")),
            issues=tuple(issues),
        )

    def source_libraries(self) -> List[str]:
        """Base library first, then every processed library, de-duplicated in order."""
        return list(dict.fromkeys(lib for lib in (BASE_LIBRARY, *self.libraries) if lib))


def _digest_count(digest: Any) -> Optional[int]:
    if not isinstance(digest, dict):
        return None
    counts = digest.get("counts")
    if not isinstance(counts, dict):
        return None
    value = counts.get("db_signals_annotated_with_vapi_alias")
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        return None
    try:
        number = float(value)
    except ValueError:
        return None
    if not math.isfinite(number) or number < 0:
        return None
    return int(number)
