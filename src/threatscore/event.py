"""
Event data structures for the threat scoring engine.

This module defines the immutable Event dataclass that the detectors read,
and the decoder that turns a raw JSON byte buffer into an Event. Fields that
are missing, or carry a value of the wrong JSON type, are stored as None so
that the field checkers can treat them as "not present".
"""

# src/threatscore/event.py
import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union

from .exceptions import DecodeError

RawInput = Union[bytes, bytearray, memoryview, str]

# Documents with more nested arrays/objects than this are rejected
MAX_NESTING_DEPTH = 127


class EventType(str, Enum):
    """Event categories the classifier knows how to score."""
    PROCESS = "process"
    NETWORK = "network"
    FILE = "file"


@dataclass(frozen=True)
class ProcessInfo:
    """Process launch details found under ``data.process``."""
    executable: Optional[str] = None
    name: Optional[str] = None
    command_line: Optional[str] = None
    user: Optional[str] = None
    pid: Optional[int] = None
    ppid: Optional[int] = None
    group: Optional[str] = None


@dataclass(frozen=True)
class NetworkInfo:
    """Connection details found under ``data.network``."""
    dest_port: Optional[int] = None
    dest_ip: Optional[str] = None
    protocol: Optional[str] = None
    direction: Optional[str] = None
    source_ip: Optional[str] = None
    source_port: Optional[int] = None
    data_size: Optional[int] = None
    process_name: Optional[str] = None


@dataclass(frozen=True)
class FileInfo:
    """File operation details found under ``data.file``."""
    path: Optional[str] = None
    operation: Optional[str] = None
    permissions: Optional[str] = None
    process_name: Optional[str] = None
    user: Optional[str] = None


@dataclass(frozen=True)
class Event:
    """
    Represents one telemetry record to be scored.

    Only ``type`` and the sub-object matching it are read by the detectors.
    ``id``, ``source`` and ``timestamp`` are carried through to verdicts and
    logs but never influence the score.

    Attributes:
        type: Declared event type ("process", "network", "file"), or None
              when the field is absent or not a string
        process: Parsed ``data.process`` object
        network: Parsed ``data.network`` object
        file: Parsed ``data.file`` object
        action: ``data.action``; only read for process events
        id: Event identifier assigned by the collector
        source: Name of the collector that produced the event
        timestamp: Collector timestamp, kept as the original string

    Example:
        >>> event = Event.from_mapping({
        ...     "type": "process",
        ...     "data": {"process": {"executable": "/bin/bash"}}
        ... })
        >>> event.process.executable
        '/bin/bash'
    """
    type: Optional[str] = None
    process: Optional[ProcessInfo] = None
    network: Optional[NetworkInfo] = None
    file: Optional[FileInfo] = None
    action: Optional[str] = None
    id: Optional[str] = None
    source: Optional[str] = None
    timestamp: Optional[str] = None

    @property
    def event_type(self) -> Optional[EventType]:
        """The declared type as an EventType, or None when unrecognized."""
        try:
            return EventType(self.type)
        except ValueError:
            return None

    @classmethod
    def from_mapping(cls, obj: Mapping[str, Any]) -> "Event":
        """Build an Event from an already-decoded JSON object."""
        if not isinstance(obj, Mapping):
            raise DecodeError(f"event must be a JSON object, got {type(obj).__name__}")

        data = _object(obj.get("data")) or {}
        process = _object(data.get("process"))
        network = _object(data.get("network"))
        file = _object(data.get("file"))

        return cls(
            type=_str(obj.get("type")),
            process=None if process is None else ProcessInfo(
                executable=_str(process.get("executable")),
                name=_str(process.get("name")),
                command_line=_str(process.get("command_line")),
                user=_str(process.get("user")),
                pid=_int(process.get("pid")),
                ppid=_int(process.get("ppid")),
                group=_str(process.get("group")),
            ),
            network=None if network is None else NetworkInfo(
                dest_port=_int(network.get("dest_port")),
                dest_ip=_str(network.get("dest_ip")),
                protocol=_str(network.get("protocol")),
                direction=_str(network.get("direction")),
                source_ip=_str(network.get("source_ip")),
                source_port=_int(network.get("source_port")),
                data_size=_int(network.get("data_size")),
                process_name=_str(network.get("process_name")),
            ),
            file=None if file is None else FileInfo(
                path=_str(file.get("path")),
                operation=_str(file.get("operation")),
                permissions=_str(file.get("permissions")),
                process_name=_str(file.get("process_name")),
                user=_str(file.get("user")),
            ),
            action=_str(data.get("action")),
            id=_str(obj.get("id")),
            source=_str(obj.get("source")),
            timestamp=_str(obj.get("timestamp")),
        )


def _str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _int(value: Any) -> Optional[int]:
    # bool is an int subclass but never a valid port or pid
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


def _object(value: Any) -> Optional[Dict[str, Any]]:
    return value if isinstance(value, dict) else None


def decode_event(raw: RawInput) -> Event:
    """
    Decode a raw JSON buffer into an Event.

    Args:
        raw: UTF-8 encoded JSON bytes, or an already-decoded str

    Returns:
        The decoded Event

    Raises:
        DecodeError: If the buffer is not strict UTF-8 JSON (NaN and
                     Infinity are rejected), is nested deeper than
                     MAX_NESTING_DEPTH, or its top level is not a JSON object
    """
    if isinstance(raw, (bytes, bytearray, memoryview)):
        try:
            # strict UTF-8: a BOM or UTF-16/32 input is rejected by json.loads
            raw = bytes(raw).decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"event is not valid UTF-8: {e}") from e
    try:
        obj = json.loads(raw, parse_constant=_reject_constant)
    except (TypeError, ValueError, RecursionError) as e:
        raise DecodeError(f"undecodable event: {e}") from e
    if _nesting_depth(obj) > MAX_NESTING_DEPTH:
        raise DecodeError(f"event nested deeper than {MAX_NESTING_DEPTH} levels")
    return Event.from_mapping(obj)


def _reject_constant(name: str) -> Any:
    raise DecodeError(f"non-finite number {name} is not valid JSON")


def _nesting_depth(obj: Any) -> int:
    """Return the number of nested arrays/objects, counting obj itself."""
    depth = 0
    stack = [(obj, 1)]
    while stack:
        value, level = stack.pop()
        if isinstance(value, dict):
            children = value.values()
        elif isinstance(value, list):
            children = value
        else:
            continue
        depth = max(depth, level)
        stack.extend((child, level + 1) for child in children)
    return depth
