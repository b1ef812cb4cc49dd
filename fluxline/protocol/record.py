"""
Record - one decoded line protocol line

Tags and fields are plain dicts: insertion order is the order they were
written in, and keys are unique. Decoding a duplicated key keeps the first
position and the last value.
"""

from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Union

from fluxline.protocol.values import FieldValue, classify_value


@dataclass
class Record:
    """
    A measurement with its tags, fields and timestamp

    Examples:
        cpu,host=server1 value=42i 1465839830100400200
        "my measurement",region="us west" temp=23.4
    """

    measurement: str
    tags: Dict[str, str] = field(default_factory=dict)
    fields: Dict[str, FieldValue] = field(default_factory=dict)
    timestamp: int = 0  # 0 means unset
    ordered: bool = field(default=True, compare=False)

    @classmethod
    def new(
        cls,
        measurement: str,
        tags: Optional[Mapping[str, str]] = None,
        fields: Optional[Mapping[str, Union[str, FieldValue]]] = None,
        timestamp: int = 0,
    ) -> "Record":
        """
        Build a record outside of decoding

        Field values may be given as literals (classified like decoded values)
        or as FieldValue instances. Such a record carries no write order, so it
        encodes with sorted tag and field keys.

        Raises:
            CodecError: If a field literal is invalid
        """
        typed = {}
        for key, value in (fields or {}).items():
            typed[key] = value if isinstance(value, FieldValue) else classify_value(value)

        return cls(
            measurement=measurement,
            tags=dict(tags or {}),
            fields=typed,
            timestamp=timestamp,
            ordered=False,
        )

    def float_fields(self) -> Dict[str, float]:
        """Field values converted to floats, in write order"""
        return {key: value.to_float() for key, value in self.fields.items()}

    def __repr__(self) -> str:
        tags = ",".join(f"{k}={v}" for k, v in self.tags.items())
        fields = ",".join(f"{k}={v.literal}" for k, v in self.fields.items())
        return f"Record({self.measurement} [{tags}] [{fields}] @{self.timestamp})"
