from __future__ import annotations

"""Registry of MWS operation definitions.

An operation is described entirely by data: its name, an ordered table of
parameters, and an optional converter applied to the unwrapped result. The
client runs every operation through the same generic pipeline, looking the
definition up here by name.

Registries are filled once at start-up and frozen before a client uses
them, so concurrent reads need no locking.
"""

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from mws_client.exceptions import OperationSpecError
from mws_client.services.mws_type_map import HTTP_BODY, is_known_type


LIST_TYPE_RE = re.compile(r"^(\w+)List$")

DEFAULT_BODY_CONTENT_TYPE = "text/xml; charset=utf-8"

ResultConverter = Callable[[Any], Any]


def list_element_type(type_tag: str) -> Optional[str]:
    """Return ``Id`` for ``IdList``; ``None`` when the tag is not a structured list."""
    match = LIST_TYPE_RE.match(type_tag)
    return match.group(1) if match else None


@dataclass(frozen=True)
class ParameterSpec:
    """Type tag and cardinality of a single operation parameter."""

    type: str
    required: bool = False

    @property
    def is_body(self) -> bool:
        return self.type == HTTP_BODY

    @property
    def list_element(self) -> Optional[str]:
        return list_element_type(self.type)


@dataclass(frozen=True)
class OperationSpec:
    """Specification of a single MWS operation."""

    name: str
    # Declaration order is the encoding order.
    parameters: Mapping[str, ParameterSpec] = field(default_factory=dict)
    # Pure function applied to the ``<Name>Result`` subtree. ``None`` returns
    # the subtree unchanged.
    respond: Optional[ResultConverter] = None
    # Return the response body untouched; service errors are NOT detected.
    raw_body: bool = False
    # Element names that may repeat; the decoder always turns them into lists.
    repeated: Tuple[str, ...] = ()
    body_content_type: str = DEFAULT_BODY_CONTENT_TYPE

    def __post_init__(self) -> None:
        if not self.name:
            raise OperationSpecError("operation name must not be empty")

        params = dict(self.parameters)
        for param_name, param in params.items():
            if not isinstance(param, ParameterSpec):
                raise OperationSpecError(
                    f"{self.name}.{param_name}: expected ParameterSpec, got {type(param).__name__}"
                )
            if param.list_element is None and not is_known_type(param.type):
                raise OperationSpecError(f"{self.name}.{param_name}: unknown type tag {param.type!r}")

        body_params = [n for n, p in params.items() if p.is_body]
        if len(body_params) > 1:
            raise OperationSpecError(
                f"{self.name}: at most one HTTP-BODY parameter is allowed, got {body_params}"
            )

        object.__setattr__(self, "parameters", MappingProxyType(params))
        object.__setattr__(self, "repeated", tuple(self.repeated))

    @property
    def body_parameter(self) -> Optional[str]:
        for param_name, param in self.parameters.items():
            if param.is_body:
                return param_name
        return None

    @property
    def required_parameters(self) -> List[str]:
        return [n for n, p in self.parameters.items() if p.required]


class OperationRegistry:
    """Name → OperationSpec table owned by a client."""

    def __init__(self, specs: Optional[List[OperationSpec]] = None):
        self._specs: Dict[str, OperationSpec] = {}
        self._frozen = False
        for spec in specs or []:
            self.register(spec)

    def register(self, spec: OperationSpec) -> OperationSpec:
        if self._frozen:
            raise OperationSpecError(f"registry is frozen; cannot register {spec.name}")
        if spec.name in self._specs:
            raise OperationSpecError(f"operation {spec.name} is already registered")
        self._specs[spec.name] = spec
        return spec

    def freeze(self) -> "OperationRegistry":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, name: str) -> OperationSpec:
        """Return the spec for ``name``.

        Raises ``KeyError`` if the name is unknown.
        """

        return self._specs[name]

    def names(self) -> List[str]:
        return list(self._specs)

    def __contains__(self, name: object) -> bool:
        return name in self._specs

    def __len__(self) -> int:
        return len(self._specs)
