"""Saving an engine between polls and building a new one from what was saved

Between polls, an engine's context and state are all there is to it, so a
checkpoint just captures those two parts. Restoring a checkpoint gives a new
engine which behaves exactly as the original would have if it had simply
been polled again.

Steps are not part of a checkpoint; they're code, and are supplied again at
restore time.

The byte format is a 4-byte big-endian length of the serialized context,
then the serialized context, then the serialized state. How the context and
state themselves are serialized is up to the Serializers passed in.

"""
from __future__ import annotations
from dataclasses import dataclass
from stepwise.computation import Computation
from stepwise.stateful import Stateful
import copy
import dataclasses
import json
import logging
import pickle
import struct
import typing as t

__all__ = [
    'Serializer',
    'JsonSerializer',
    'PickleSerializer',
    'Checkpoint',
]

logger = logging.getLogger(__name__)

T = t.TypeVar('T')
CTX = t.TypeVar('CTX')
STATE = t.TypeVar('STATE')
S = t.TypeVar('S', bound=Stateful)

class Serializer(t.Generic[T]):
    "Turns one half of a checkpoint, the context or the state, into bytes and back."
    def to_bytes(self, val: T) -> bytes:
        "Encode `val` for storage in a checkpoint."
        raise NotImplementedError("to_bytes not implemented on", type(self))

    def from_bytes(self, data: bytes) -> T:
        "Rebuild a value from bytes produced by `to_bytes`."
        raise NotImplementedError("from_bytes not implemented on", type(self))

@dataclass
class JsonSerializer(Serializer[T]):
    """Serializes JSON-compatible values, or flat dataclasses of them.

    If `cls` is set, values are dataclass instances of `cls`, serialized as a
    JSON object of their fields and rebuilt by calling `cls` with those fields.
    Fields which are themselves dataclasses come back as dicts.

    """
    cls: t.Optional[t.Type[T]] = None

    def to_bytes(self, val: T) -> bytes:
        if dataclasses.is_dataclass(val) and not isinstance(val, type):
            return json.dumps(dataclasses.asdict(val), sort_keys=True).encode()
        return json.dumps(val, sort_keys=True).encode()

    def from_bytes(self, data: bytes) -> T:
        obj = json.loads(data)
        if self.cls is None:
            return obj
        return self.cls(**obj)

class PickleSerializer(Serializer[t.Any]):
    "Serializes anything picklable."
    def to_bytes(self, val: t.Any) -> bytes:
        return pickle.dumps(val)

    def from_bytes(self, data: bytes) -> t.Any:
        return pickle.loads(data)

_length = struct.Struct("!I")

@dataclass(frozen=True)
class Checkpoint(t.Generic[CTX, STATE]):
    context: CTX
    state: STATE

    @classmethod
    def save(cls, engine: Stateful[CTX, STATE]) -> Checkpoint[CTX, STATE]:
        """Capture the parts of this engine.

        The state is copied, so the engine can keep running without changing
        the checkpoint. The context is immutable, so it's shared.

        """
        context, state = engine.into_parts()
        return cls(context, copy.deepcopy(state))

    def restore(self, step: t.Any, engine_type: t.Callable[..., S]=Computation) -> S: # type: ignore
        "Build a new engine of `engine_type` which continues from this checkpoint."
        logger.debug("restoring %s from %s", engine_type, self)
        return engine_type(step, self.context, copy.deepcopy(self.state))

    def to_bytes(self, context_serializer: Serializer[CTX], state_serializer: Serializer[STATE]) -> bytes:
        context_data = context_serializer.to_bytes(self.context)
        state_data = state_serializer.to_bytes(self.state)
        return _length.pack(len(context_data)) + context_data + state_data

    @classmethod
    def from_bytes(cls, data: bytes,
                   context_serializer: Serializer[CTX], state_serializer: Serializer[STATE],
    ) -> Checkpoint[CTX, STATE]:
        if len(data) < _length.size:
            raise ValueError("checkpoint data too short to contain a header", data)
        context_length, = _length.unpack_from(data)
        context_end = _length.size + context_length
        if len(data) < context_end:
            raise ValueError("checkpoint data truncated: expected a context of length", context_length,
                             "but only have", len(data) - _length.size)
        return cls(context_serializer.from_bytes(data[_length.size:context_end]),
                   state_serializer.from_bytes(data[context_end:]))
