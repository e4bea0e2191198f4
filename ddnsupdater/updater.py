"""Detecting IP addresses and updating the DNS records and WAF lists that use them."""

from __future__ import annotations

import enum
import time
from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol, Sequence, runtime_checkable

from .messages import (
    IPAddress,
    IPNetwork,
    Message,
    ResponseCode,
    ResponseTally,
    detect_message,
    final_clear_waf_lists_message,
    final_delete_message,
    merge_messages,
    update_message,
    update_waf_lists_message,
)

EMOJI_INTERNET = "🌐"
EMOJI_ERROR = "😡"
EMOJI_HINT = "🤔"
MANUAL_URL = "the manual"
TTL_AUTO = 1


class MessageID(enum.Enum):
    """Identifiers of hints that are shown at most once."""

    IP4_DETECTION_FAILS = "ip4-detection-fails"
    IP6_DETECTION_FAILS = "ip6-detection-fails"
    DETECTION_TIMEOUTS = "detection-timeouts"
    UPDATE_TIMEOUTS = "update-timeouts"


_DETECTION_MESSAGE_IDS = {
    IPNetwork.IP4: MessageID.IP4_DETECTION_FAILS,
    IPNetwork.IP6: MessageID.IP6_DETECTION_FAILS,
}


@dataclass(frozen=True)
class RecordParams:
    """Settings applied to every DNS record that is written."""

    ttl: int = TTL_AUTO
    proxied: bool = False
    comment: str = ""


@dataclass(frozen=True)
class WAFList:
    """A WAF list identified by its account and name."""

    account_id: str
    name: str

    def describe(self) -> str:
        """The list as ``account/name``."""
        return f"{self.account_id}/{self.name}"


@dataclass(frozen=True)
class Deadline:
    """A point in ``time.monotonic()`` time; ``None`` never expires."""

    at: Optional[float] = None

    @classmethod
    def after(cls, seconds: float) -> Deadline:
        """A deadline ``seconds`` from now."""
        return cls(time.monotonic() + seconds)

    def expired(self) -> bool:
        """Whether the deadline has passed."""
        return self.at is not None and time.monotonic() >= self.at

    @property
    def remaining(self) -> Optional[float]:
        """Seconds left, or None if there is no deadline."""
        if self.at is None:
            return None
        return max(0.0, self.at - time.monotonic())


class Provider(Protocol):
    def get_ip(self, deadline: Deadline, ppfmt, ip_network: IPNetwork) -> Optional[IPAddress]: ...


@runtime_checkable
class CompositeProvider(Protocol):
    def get_all_ips(
        self, deadline: Deadline, ppfmt, ip_network: IPNetwork
    ) -> Sequence[IPAddress]: ...


@dataclass
class UpdaterConfig:
    """The settings the updater needs."""

    providers: dict = field(default_factory=dict)
    domains: dict = field(default_factory=dict)
    ttl: int = TTL_AUTO
    proxied: dict = field(default_factory=dict)
    record_comment: str = ""
    waf_lists: list = field(default_factory=list)
    waf_list_description: str = ""
    detection_timeout: float = 5.0
    update_timeout: float = 30.0

    def _record_params(self, domain: str) -> RecordParams:
        return RecordParams(
            ttl=self.ttl,
            proxied=self.proxied.get(domain, False),
            comment=self.record_comment,
        )


def _format_duration(seconds: float) -> str:
    if seconds == 0:
        return "0s"
    if seconds < 1:
        return f"{round(seconds * 1000, 6):g}ms"
    minutes, secs = divmod(seconds, 60)
    hours, minutes = divmod(int(minutes), 60)
    text = f"{round(secs, 9):g}s"
    if hours:
        return f"{hours}h{minutes}m{text}"
    if minutes:
        return f"{minutes}m{text}"
    return text


def detect_ip(ppfmt, config: UpdaterConfig, ip_network: IPNetwork) -> tuple:
    """Detect the address of ``ip_network``; return it (or None) with a message."""
    deadline = Deadline.after(config.detection_timeout)
    ip = config.providers[ip_network].get_ip(deadline, ppfmt, ip_network)
    ok = ip is not None

    if ok:
        ppfmt.infof(EMOJI_INTERNET, "Detected the %s address %s", ip_network.describe(), ip)
        ppfmt.suppress(_DETECTION_MESSAGE_IDS[ip_network])
    else:
        ppfmt.noticef(EMOJI_ERROR, "Failed to detect the %s address", ip_network.describe())
        if ip_network is IPNetwork.IP6:
            ppfmt.notice_oncef(
                _DETECTION_MESSAGE_IDS[ip_network],
                EMOJI_HINT,
                "If you are using Docker or Kubernetes, IPv6 might need extra setup. "
                "Read more at %s. "
                "If your network doesn't support IPv6, you can turn it off by setting "
                "IP6_PROVIDER=none",
                MANUAL_URL,
            )
        else:
            ppfmt.notice_oncef(
                _DETECTION_MESSAGE_IDS[ip_network],
                EMOJI_HINT,
                "If your network does not support IPv4, you can disable it with IP4_PROVIDER=none",
            )
        if deadline.expired():
            ppfmt.notice_oncef(
                MessageID.DETECTION_TIMEOUTS,
                EMOJI_HINT,
                "If your network is experiencing high latency, "
                "consider increasing DETECTION_TIMEOUT=%s",
                _format_duration(config.detection_timeout),
            )
    return ip, detect_message(ip_network, ok)


def _with_update_timeout(
    ppfmt, config: UpdaterConfig, action: Callable[[Deadline], ResponseCode]
) -> ResponseCode:
    deadline = Deadline.after(config.update_timeout)
    response = action(deadline)
    if response is ResponseCode.FAILED and deadline.expired():
        ppfmt.notice_oncef(
            MessageID.UPDATE_TIMEOUTS,
            EMOJI_HINT,
            "If your network is experiencing high latency, consider increasing UPDATE_TIMEOUT=%s",
            _format_duration(config.update_timeout),
        )
    return response


def _set_ip(ppfmt, config: UpdaterConfig, setter, ip_network: IPNetwork, ip: IPAddress) -> Message:
    tally = ResponseTally()
    for domain in config.domains.get(ip_network, []):
        params = config._record_params(domain)
        tally.register(
            str(domain),
            _with_update_timeout(
                ppfmt,
                config,
                lambda deadline: setter.set(deadline, ppfmt, ip_network, domain, ip, params),
            ),
        )
    return update_message(ip_network, ip, tally)


def _set_ips(
    ppfmt, config: UpdaterConfig, setter, ip_network: IPNetwork, ips: Sequence[IPAddress]
) -> Message:
    tally = ResponseTally()
    for domain in config.domains.get(ip_network, []):
        params = config._record_params(domain)
        tally.register(
            str(domain),
            _with_update_timeout(
                ppfmt,
                config,
                lambda deadline: setter.set_multiple(
                    deadline, ppfmt, ip_network, domain, list(ips), params
                ),
            ),
        )
    return update_message(ip_network, ips[0], tally)


def _final_delete_ip(ppfmt, config: UpdaterConfig, setter, ip_network: IPNetwork) -> Message:
    tally = ResponseTally()
    for domain in config.domains.get(ip_network, []):
        params = config._record_params(domain)
        tally.register(
            str(domain),
            _with_update_timeout(
                ppfmt,
                config,
                lambda deadline: setter.final_delete(deadline, ppfmt, ip_network, domain, params),
            ),
        )
    return final_delete_message(ip_network, tally)


def _set_waf_lists(ppfmt, config: UpdaterConfig, setter, detected: dict) -> Message:
    tally = ResponseTally()
    for waf_list in config.waf_lists:
        tally.register(
            waf_list.describe(),
            _with_update_timeout(
                ppfmt,
                config,
                lambda deadline: setter.set_waf_list(
                    deadline, ppfmt, waf_list, config.waf_list_description, dict(detected), ""
                ),
            ),
        )
    return update_waf_lists_message(tally)


def _final_clear_waf_lists(ppfmt, config: UpdaterConfig, setter) -> Message:
    tally = ResponseTally()
    for waf_list in config.waf_lists:
        tally.register(
            waf_list.describe(),
            _with_update_timeout(
                ppfmt,
                config,
                lambda deadline: setter.final_clear_waf_list(
                    deadline, ppfmt, waf_list, config.waf_list_description
                ),
            ),
        )
    return final_clear_waf_lists_message(tally)


def update_ips(ppfmt, config: UpdaterConfig, setter) -> Message:
    """Detect addresses and update the DNS records and WAF lists of managed domains."""
    messages: list[Message] = []
    detected: dict = {}
    managed = 0
    valid = 0

    for ip_network in (IPNetwork.IP4, IPNetwork.IP6):
        provider = config.providers.get(ip_network)
        if provider is None:
            continue
        managed += 1

        if isinstance(provider, CompositeProvider):
            ips = list(provider.get_all_ips(Deadline(), ppfmt, ip_network))
            if ips:
                detected[ip_network] = ips[0]
                valid += 1
                ppfmt.infof(
                    EMOJI_INTERNET,
                    "Detected %d %s addresses: %s",
                    len(ips),
                    ip_network.describe(),
                    ", ".join(str(ip) for ip in ips),
                )
                messages.append(_set_ips(ppfmt, config, setter, ip_network, ips))
            else:
                ppfmt.noticef(EMOJI_ERROR, "Failed to detect %s addresses", ip_network.describe())
                messages.append(detect_message(ip_network, False))
            continue

        ip, message = detect_ip(ppfmt, config, ip_network)
        detected[ip_network] = ip
        messages.append(message)
        # Without a fresh address, existing records are better left alone.
        if message.monitor_message.ok:
            valid += 1
            messages.append(_set_ip(ppfmt, config, setter, ip_network, ip))

    if not (managed == 2 and valid == 0):
        messages.append(_set_waf_lists(ppfmt, config, setter, detected))

    return merge_messages(*messages)


def final_delete_ips(ppfmt, config: UpdaterConfig, setter) -> Message:
    """Delete all DNS records of managed domains and clear the WAF lists."""
    messages = [
        _final_delete_ip(ppfmt, config, setter, ip_network)
        for ip_network in (IPNetwork.IP4, IPNetwork.IP6)
        if config.providers.get(ip_network) is not None
    ]
    messages.append(_final_clear_waf_lists(ppfmt, config, setter))
    return merge_messages(*messages)