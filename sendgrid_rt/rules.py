from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Optional

from django.core.exceptions import ImproperlyConfigured


@dataclass(frozen=True)
class Rule:
    """Where (queue) and how (action) a ticket is filed in RT."""

    queue: str
    action: str


DEFAULT_RULE = Rule(queue="General", action="correspond")


class RuleTable(Mapping):
    """
    Read-only mapping of recipient address to Rule.

    Addresses are matched exactly as received: no case folding and no
    wildcards.
    """

    def __init__(self, rules=None):
        self._rules = MappingProxyType(dict(rules or {}))

    @classmethod
    def build(cls, entries: Iterable[tuple[str, Rule]]) -> "RuleTable":
        """
        Build a table from ``(address, rule)`` pairs in declared order.

        Later entries overwrite earlier ones, so the last rule declared for
        an address wins.
        """
        rules = {}
        for address, rule in entries:
            rules[address] = rule
        return cls(rules)

    def resolve(self, address: str) -> Optional[Rule]:
        return self._rules.get(address)

    def __getitem__(self, address):
        return self._rules[address]

    def __iter__(self):
        return iter(self._rules)

    def __len__(self):
        return len(self._rules)

    def __repr__(self):
        return f"RuleTable({dict(self._rules)!r})"


def rules_from_config(items) -> list[tuple[str, Rule]]:
    """
    Convert the configured rule list into ``(address, Rule)`` pairs.

    Each item must be a mapping with non-empty ``address``, ``queue`` and
    ``action`` keys. Raises ImproperlyConfigured otherwise.
    """
    if items is None:
        return []
    if isinstance(items, (str, bytes)) or not isinstance(items, Iterable):
        raise ImproperlyConfigured("SENDGRID_RT['RULES'] must be a list of rules.")

    entries = []
    for index, item in enumerate(items):
        if not isinstance(item, Mapping):
            raise ImproperlyConfigured(
                f"Rule #{index} must be a mapping with address, queue and action."
            )
        values = {}
        for key in ("address", "queue", "action"):
            value = item.get(key)
            if not isinstance(value, str) or not value.strip():
                raise ImproperlyConfigured(
                    f"Rule #{index} is missing a non-empty '{key}'."
                )
            values[key] = value
        entries.append(
            (values["address"], Rule(queue=values["queue"], action=values["action"]))
        )
    return entries


def default_rule_from_config(value) -> Rule:
    """
    Build the fallback rule from the configured ``{queue, action}`` mapping.

    Missing or blank halves are taken from DEFAULT_RULE.
    """
    if value is None:
        return DEFAULT_RULE
    if isinstance(value, Rule):
        return value
    if not isinstance(value, Mapping):
        raise ImproperlyConfigured(
            "SENDGRID_RT['DEFAULT'] must be a mapping with queue and action."
        )

    queue = value.get("queue") or DEFAULT_RULE.queue
    action = value.get("action") or DEFAULT_RULE.action
    if not isinstance(queue, str) or not isinstance(action, str):
        raise ImproperlyConfigured(
            "SENDGRID_RT['DEFAULT'] queue and action must be strings."
        )
    return Rule(queue=queue, action=action)
