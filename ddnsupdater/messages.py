"""Monitor and notifier messages summarising detection and update results."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from ipaddress import IPv4Address, IPv6Address
from typing import Iterable, Sequence, Tuple, Union

IPAddress = Union[IPv4Address, IPv6Address]


class ResponseCode(enum.Enum):
    """Outcome of a single update or deletion."""

    NOOP = "noop"
    UPDATING = "updating"
    UPDATED = "updated"
    FAILED = "failed"


class IPNetwork(enum.Enum):
    """The IP family whose records are managed."""

    IP4 = 4
    IP6 = 6

    def describe(self) -> str:
        """Human-readable name of the family."""
        return "IPv4" if self is IPNetwork.IP4 else "IPv6"

    def record_type(self) -> str:
        """DNS record type holding addresses of this family."""
        return "A" if self is IPNetwork.IP4 else "AAAA"


@dataclass
class MonitorMessage:
    """A status report for health monitors."""

    ok: bool = True
    lines: list[str] = field(default_factory=list)


@dataclass
class Message:
    """A pair of messages: one for monitors, one for notifiers."""

    monitor_message: MonitorMessage = field(default_factory=MonitorMessage)
    notifier_message: list[str] = field(default_factory=list)


class ResponseTally(dict):
    """Names grouped by the response code they received, in registration order."""

    def register(self, name: str, code: ResponseCode) -> None:
        """Record that ``name`` received ``code``."""
        self.setdefault(code, []).append(name)


def join(items: Iterable[str]) -> str:
    """Join items with commas."""
    return ", ".join(items)


def english_join(items: Iterable[str]) -> str:
    """Join items as an English list with a serial comma."""
    items = list(items)
    if len(items) <= 2:
        return " and ".join(items)
    return ", ".join(items[:-1]) + ", and " + items[-1]


def merge_monitor_messages(*messages: MonitorMessage) -> MonitorMessage:
    """Combine monitor messages; if any failed, only failure lines are kept."""
    success_lines: list[str] = []
    failure_lines: list[str] = []
    for message in messages:
        (success_lines if message.ok else failure_lines).extend(message.lines)
    if all(message.ok for message in messages):
        return MonitorMessage(ok=True, lines=success_lines)
    return MonitorMessage(ok=False, lines=failure_lines)


def merge_notifier_messages(*messages: Sequence[str]) -> list[str]:
    """Concatenate notifier messages."""
    return [line for message in messages for line in message]


def merge_messages(*messages: Message) -> Message:
    """Combine compound messages."""
    return Message(
        monitor_message=merge_monitor_messages(*(m.monitor_message for m in messages)),
        notifier_message=merge_notifier_messages(*(m.notifier_message for m in messages)),
    )


def detect_message(ip_network: IPNetwork, ok: bool) -> Message:
    """Message describing the result of detecting an address."""
    if ok:
        return Message()
    return Message(
        monitor_message=MonitorMessage(
            ok=False, lines=[f"Failed to detect {ip_network.describe()} address"]
        ),
        notifier_message=[f"Failed to detect the {ip_network.describe()} address."],
    )


def _names(tally: ResponseTally, code: ResponseCode) -> list[str]:
    return tally.get(code, [])


def _monitor(tally: ResponseTally, failed: str, updating: str, updated: str) -> MonitorMessage:
    failed_names = _names(tally, ResponseCode.FAILED)
    if failed_names:
        return MonitorMessage(ok=False, lines=[failed + join(failed_names)])
    forms = ((ResponseCode.UPDATING, updating), (ResponseCode.UPDATED, updated))
    return MonitorMessage(
        ok=True,
        lines=[
            prefix + join(_names(tally, code)) for code, prefix in forms if _names(tally, code)
        ],
    )


_NotifierForm = Tuple[ResponseCode, str, str]


def _notifier(tally: ResponseTally, forms: Sequence[_NotifierForm]) -> list[str]:
    fragments: list[str] = []
    for code, first, later in forms:
        names = _names(tally, code)
        if names:
            template = later if fragments else first
            fragments.append(template.format(names=english_join(names)))
    if not fragments:
        return []
    return ["".join(fragments) + "."]


def update_message(ip_network: IPNetwork, ip: IPAddress, tally: ResponseTally) -> Message:
    """Message describing the results of setting records to ``ip``."""
    rtype = ip_network.record_type()
    monitor = _monitor(
        tally,
        f"Failed to set {rtype} ({ip}) of ",
        f"Setting {rtype} ({ip}) of ",
        f"Set {rtype} ({ip}) of ",
    )
    failed = f"Failed to properly update {rtype} records of {{names}} with {ip}"
    notifier = _notifier(
        tally,
        (
            (ResponseCode.FAILED, failed, failed),
            (
                ResponseCode.UPDATING,
                f"Updating {rtype} records of {{names}} with {ip}",
                "; updating those of {names}",
            ),
            (
                ResponseCode.UPDATED,
                f"Updated {rtype} records of {{names}} with {ip}",
                "; updated those of {names}",
            ),
        ),
    )
    return Message(monitor_message=monitor, notifier_message=notifier)


def final_delete_message(ip_network: IPNetwork, tally: ResponseTally) -> Message:
    """Message describing the results of deleting records on shutdown."""
    rtype = ip_network.record_type()
    monitor = _monitor(
        tally,
        f"Failed to delete {rtype} of ",
        f"Deleting {rtype} of ",
        f"Deleted {rtype} of ",
    )
    failed = f"Failed to properly delete {rtype} records of {{names}}"
    notifier = _notifier(
        tally,
        (
            (ResponseCode.FAILED, failed, failed),
            (
                ResponseCode.UPDATING,
                f"Deleting {rtype} records of {{names}}",
                "; deleting those of {names}",
            ),
            (
                ResponseCode.UPDATED,
                f"Deleted {rtype} records of {{names}}",
                "; deleted those of {names}",
            ),
        ),
    )
    return Message(monitor_message=monitor, notifier_message=notifier)


def update_waf_lists_message(tally: ResponseTally) -> Message:
    """Message describing the results of updating WAF lists."""
    monitor = _monitor(tally, "Failed to set list(s) ", "Setting list(s) ", "Set list(s) ")
    failed = "Failed to properly update WAF list(s) {names}"
    notifier = _notifier(
        tally,
        (
            (ResponseCode.FAILED, failed, failed),
            (ResponseCode.UPDATING, "Updating WAF list(s) {names}", "; updating {names}"),
            (ResponseCode.UPDATED, "Updated WAF list(s) {names}", "; updated {names}"),
        ),
    )
    return Message(monitor_message=monitor, notifier_message=notifier)


def final_clear_waf_lists_message(tally: ResponseTally) -> Message:
    """Message describing the results of clearing WAF lists on shutdown."""
    monitor = _monitor(
        tally, "Failed to clear list(s) ", "Clearing list(s) ", "Cleared list(s) "
    )
    failed = "Failed to properly clear WAF list(s) {names}"
    notifier = _notifier(
        tally,
        (
            (ResponseCode.FAILED, failed, failed),
            (ResponseCode.UPDATING, "Clearing WAF list(s) {names}", "; clearing {names}"),
            (ResponseCode.UPDATED, "Cleared WAF list(s) {names}", "; cleared {names}"),
        ),
    )
    return Message(monitor_message=monitor, notifier_message=notifier)