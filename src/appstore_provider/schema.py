"""
Attribute schemas and change planning.

A schema lists the attributes of a provider, resource or data source and
how each behaves when the configuration changes. ``Schema.plan`` turns a
prior state and a new configuration into the values the next apply will
produce, and reports the attributes that force the resource to be
destroyed and created again.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from .utils import UNKNOWN


@dataclass(frozen=True)
class Attribute:
    name: str
    type: type
    description: str = ""
    required: bool = False
    computed: bool = False
    sensitive: bool = False
    requires_replace: bool = False
    use_state_for_unknown: bool = False

    @property
    def configurable(self) -> bool:
        return self.required or not self.computed


@dataclass
class Plan:
    """Outcome of comparing prior state with configuration."""

    planned: Dict[str, Any]
    changed: List[str] = field(default_factory=list)
    replace: List[str] = field(default_factory=list)

    @property
    def requires_replace(self) -> bool:
        return bool(self.replace)

    @property
    def has_changes(self) -> bool:
        return bool(self.changed)


@dataclass
class Schema:
    description: str
    attributes: List[Attribute]

    def __getitem__(self, name: str) -> Attribute:
        for attribute in self.attributes:
            if attribute.name == name:
                return attribute
        raise KeyError(name)

    @property
    def names(self) -> List[str]:
        return [a.name for a in self.attributes]

    @property
    def required(self) -> List[str]:
        return [a.name for a in self.attributes if a.required]

    @property
    def sensitive(self) -> List[str]:
        return [a.name for a in self.attributes if a.sensitive]

    def plan(
        self, prior: Optional[Mapping[str, Any]], config: Mapping[str, Any]
    ) -> Plan:
        """
        Compute the planned values for an update of ``prior`` to ``config``.

        Configurable attributes take their configured value. Computed-only
        attributes keep their prior value when nothing configurable changed;
        otherwise they become UNKNOWN unless they use state for unknown.
        With no prior state every computed-only attribute is UNKNOWN.

        Args:
            prior: Attribute values of the current state, or None
            config: Attribute values of the new configuration

        Returns:
            Plan with the planned values, the changed attribute names and
            the names of attributes forcing replacement
        """
        prior = prior or {}
        planned: Dict[str, Any] = {}

        for attribute in self.attributes:
            if attribute.configurable:
                planned[attribute.name] = config.get(attribute.name)

        config_changed = any(
            planned[name] != prior.get(name) for name in planned
        )

        for attribute in self.attributes:
            if attribute.configurable:
                continue
            if not prior:
                planned[attribute.name] = UNKNOWN
            elif config_changed and not attribute.use_state_for_unknown:
                planned[attribute.name] = UNKNOWN
            else:
                planned[attribute.name] = prior.get(attribute.name)

        changed = [
            a.name for a in self.attributes if planned[a.name] != prior.get(a.name)
        ]
        replace = []
        if prior:
            replace = [
                a.name
                for a in self.attributes
                if a.requires_replace and a.name in changed
            ]
        return Plan(planned=planned, changed=changed, replace=replace)
