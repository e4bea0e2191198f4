from ipaddress import ip_address

from ddnsupdater.messages import (
    IPNetwork,
    Message,
    MonitorMessage,
    ResponseCode,
    ResponseTally,
    detect_message,
    english_join,
    final_clear_waf_lists_message,
    final_delete_message,
    join,
    merge_messages,
    merge_monitor_messages,
    merge_notifier_messages,
    update_message,
    update_waf_lists_message,
)

IP4 = ip_address("127.0.0.1")
IP6 = ip_address("::1")


def tally_of(*pairs):
    tally = ResponseTally()
    for name, code in pairs:
        tally.register(name, code)
    return tally


def mixed_domains():
    return tally_of(
        ("ip4.hello1", ResponseCode.UPDATING),
        ("ip4.hello2", ResponseCode.FAILED),
        ("ip4.hello3", ResponseCode.NOOP),
        ("ip4.hello4", ResponseCode.UPDATED),
    )


def mostly_updated_domains():
    return tally_of(
        ("ip4.hello1", ResponseCode.UPDATED),
        ("ip4.hello2", ResponseCode.NOOP),
        ("ip4.hello3", ResponseCode.UPDATED),
        ("ip4.hello4", ResponseCode.UPDATED),
    )


def mixed_lists():
    return tally_of(
        ("12341234/list1", ResponseCode.UPDATING),
        ("xxxxxxxx/list2", ResponseCode.FAILED),
        ("AAAAAAAA/list3", ResponseCode.NOOP),
        ("zzz/list4", ResponseCode.UPDATED),
    )


def test_ip_network_names():
    assert IPNetwork.IP4.describe() == "IPv4"
    assert IPNetwork.IP6.describe() == "IPv6"
    assert IPNetwork.IP4.record_type() == "A"
    assert IPNetwork.IP6.record_type() == "AAAA"


def test_join():
    assert join(["ip4.hello1", "ip4.hello3", "ip4.hello4"]) == "ip4.hello1, ip4.hello3, ip4.hello4"


def test_english_join():
    assert english_join(["ip4.hello"]) == "ip4.hello"
    assert english_join(["AAAAAAAA/list3", "zzz/list4"]) == "AAAAAAAA/list3 and zzz/list4"
    assert (
        english_join(["ip4.hello1", "ip4.hello3", "ip4.hello4"])
        == "ip4.hello1, ip4.hello3, and ip4.hello4"
    )


def test_detect_message():
    assert detect_message(IPNetwork.IP4, True) == Message()
    assert detect_message(IPNetwork.IP4, False) == Message(
        MonitorMessage(False, ["Failed to detect IPv4 address"]),
        ["Failed to detect the IPv4 address."],
    )
    assert detect_message(IPNetwork.IP6, False) == Message(
        MonitorMessage(False, ["Failed to detect IPv6 address"]),
        ["Failed to detect the IPv6 address."],
    )


def test_update_message_mixed():
    assert update_message(IPNetwork.IP4, IP4, mixed_domains()) == Message(
        MonitorMessage(False, ["Failed to set A (127.0.0.1) of ip4.hello2"]),
        [
            "Failed to properly update A records of ip4.hello2 with 127.0.0.1; "
            "updating those of ip4.hello1; updated those of ip4.hello4."
        ],
    )


def test_update_message_updated():
    assert update_message(IPNetwork.IP4, IP4, mostly_updated_domains()) == Message(
        MonitorMessage(True, ["Set A (127.0.0.1) of ip4.hello1, ip4.hello3, ip4.hello4"]),
        ["Updated A records of ip4.hello1, ip4.hello3, and ip4.hello4 with 127.0.0.1."],
    )


def test_update_message_single_cases():
    updating = tally_of(("ip4.hello", ResponseCode.UPDATING))
    assert update_message(IPNetwork.IP4, IP4, updating) == Message(
        MonitorMessage(True, ["Setting A (127.0.0.1) of ip4.hello"]),
        ["Updating A records of ip4.hello with 127.0.0.1."],
    )
    updated6 = tally_of(("ip6.hello", ResponseCode.UPDATED))
    assert update_message(IPNetwork.IP6, IP6, updated6) == Message(
        MonitorMessage(True, ["Set AAAA (::1) of ip6.hello"]),
        ["Updated AAAA records of ip6.hello with ::1."],
    )
    failed6 = tally_of(("ip6.hello", ResponseCode.FAILED))
    assert update_message(IPNetwork.IP6, IP6, failed6) == Message(
        MonitorMessage(False, ["Failed to set AAAA (::1) of ip6.hello"]),
        ["Failed to properly update AAAA records of ip6.hello with ::1."],
    )


def test_update_message_noop_is_empty():
    noop = tally_of(("ip4.hello", ResponseCode.NOOP))
    assert update_message(IPNetwork.IP4, IP4, noop) == Message()
    assert update_message(IPNetwork.IP4, IP4, ResponseTally()) == Message()


def test_final_delete_message():
    assert final_delete_message(IPNetwork.IP4, mixed_domains()) == Message(
        MonitorMessage(False, ["Failed to delete A of ip4.hello2"]),
        [
            "Failed to properly delete A records of ip4.hello2; "
            "deleting those of ip4.hello1; deleted those of ip4.hello4."
        ],
    )
    assert final_delete_message(IPNetwork.IP4, mostly_updated_domains()) == Message(
        MonitorMessage(True, ["Deleted A of ip4.hello1, ip4.hello3, ip4.hello4"]),
        ["Deleted A records of ip4.hello1, ip4.hello3, and ip4.hello4."],
    )
    deleting = tally_of(("ip4.hello", ResponseCode.UPDATING))
    assert final_delete_message(IPNetwork.IP4, deleting) == Message(
        MonitorMessage(True, ["Deleting A of ip4.hello"]),
        ["Deleting A records of ip4.hello."],
    )
    failed6 = tally_of(("ip6.hello", ResponseCode.FAILED))
    assert final_delete_message(IPNetwork.IP6, failed6) == Message(
        MonitorMessage(False, ["Failed to delete AAAA of ip6.hello"]),
        ["Failed to properly delete AAAA records of ip6.hello."],
    )


def test_update_waf_lists_message():
    assert update_waf_lists_message(mixed_lists()) == Message(
        MonitorMessage(False, ["Failed to set list(s) xxxxxxxx/list2"]),
        [
            "Failed to properly update WAF list(s) xxxxxxxx/list2; "
            "updating 12341234/list1; updated zzz/list4."
        ],
    )
    partial = tally_of(
        ("12341234/list1", ResponseCode.UPDATING),
        ("xxxxxxxx/list2", ResponseCode.NOOP),
        ("AAAAAAAA/list3", ResponseCode.UPDATED),
        ("zzz/list4", ResponseCode.UPDATED),
    )
    assert update_waf_lists_message(partial) == Message(
        MonitorMessage(
            True, ["Setting list(s) 12341234/list1", "Set list(s) AAAAAAAA/list3, zzz/list4"]
        ),
        ["Updating WAF list(s) 12341234/list1; updated AAAAAAAA/list3 and zzz/list4."],
    )
    updated = tally_of(("12341234/list", ResponseCode.UPDATED))
    assert update_waf_lists_message(updated) == Message(
        MonitorMessage(True, ["Set list(s) 12341234/list"]),
        ["Updated WAF list(s) 12341234/list."],
    )


def test_final_clear_waf_lists_message():
    assert final_clear_waf_lists_message(mixed_lists()) == Message(
        MonitorMessage(False, ["Failed to clear list(s) xxxxxxxx/list2"]),
        [
            "Failed to properly clear WAF list(s) xxxxxxxx/list2; "
            "clearing 12341234/list1; cleared zzz/list4."
        ],
    )
    cleared = tally_of(
        ("12341234/list1", ResponseCode.UPDATED),
        ("xxxxxxxx/list2", ResponseCode.NOOP),
        ("AAAAAAAA/list3", ResponseCode.UPDATED),
        ("zzz/list4", ResponseCode.UPDATED),
    )
    assert final_clear_waf_lists_message(cleared) == Message(
        MonitorMessage(True, ["Cleared list(s) 12341234/list1, AAAAAAAA/list3, zzz/list4"]),
        ["Cleared WAF list(s) 12341234/list1, AAAAAAAA/list3, and zzz/list4."],
    )
    clearing = tally_of(("12341234/list", ResponseCode.UPDATING))
    assert final_clear_waf_lists_message(clearing) == Message(
        MonitorMessage(True, ["Clearing list(s) 12341234/list"]),
        ["Clearing WAF list(s) 12341234/list."],
    )


def test_merge_all_successful():
    merged = merge_messages(
        final_delete_message(IPNetwork.IP4, tally_of(("ip4.hello", ResponseCode.UPDATED))),
        final_delete_message(IPNetwork.IP6, tally_of(("ip6.hello", ResponseCode.UPDATED))),
        final_clear_waf_lists_message(tally_of(("12341234/list", ResponseCode.UPDATED))),
    )
    assert merged == Message(
        MonitorMessage(
            True,
            ["Deleted A of ip4.hello", "Deleted AAAA of ip6.hello", "Cleared list(s) 12341234/list"],
        ),
        [
            "Deleted A records of ip4.hello.",
            "Deleted AAAA records of ip6.hello.",
            "Cleared WAF list(s) 12341234/list.",
        ],
    )


def test_merge_keeps_only_failure_lines_for_monitor():
    failed = update_message(IPNetwork.IP4, IP4, tally_of(("ip4.hello", ResponseCode.FAILED)))
    updated = update_message(IPNetwork.IP6, IP6, tally_of(("ip6.hello", ResponseCode.UPDATED)))
    noop = update_waf_lists_message(tally_of(("12341234/list", ResponseCode.NOOP)))
    merged = merge_messages(failed, updated, noop)
    assert merged.monitor_message == MonitorMessage(
        False, ["Failed to set A (127.0.0.1) of ip4.hello"]
    )
    assert merged.notifier_message == [
        "Failed to properly update A records of ip4.hello with 127.0.0.1.",
        "Updated AAAA records of ip6.hello with ::1.",
    ]


def test_merge_with_detection_failure():
    merged = merge_messages(
        detect_message(IPNetwork.IP4, False),
        detect_message(IPNetwork.IP6, False),
    )
    assert merged == Message(
        MonitorMessage(False, ["Failed to detect IPv4 address", "Failed to detect IPv6 address"]),
        ["Failed to detect the IPv4 address.", "Failed to detect the IPv6 address."],
    )


def test_merge_nothing_is_empty():
    assert merge_messages() == Message()
    assert merge_monitor_messages() == MonitorMessage()
    assert merge_notifier_messages() == []


def test_merge_notifier_preserves_order():
    first = ["Failed to detect the IPv4 address."]
    second = ["Updated AAAA records of ip6.hello with ::1."]
    assert merge_notifier_messages(first, [], second) == first + second