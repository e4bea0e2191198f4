# ddnsupdater

A small library that drives one dynamic DNS update cycle: it asks providers
for the current IPv4 and IPv6 addresses, asks a setter to update the DNS
records of the managed domains and the managed WAF lists, and sums up what
happened in messages for a health monitor and for a human-facing notifier.
It also offers a way to wait between cycles that SIGINT or SIGTERM can
interrupt.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## `ddnsupdater.updater`

The update cycle.

- `UpdaterConfig` holds the settings: `providers` (a dict from `IPNetwork`
  to a provider, or `None` for an unmanaged family), `domains` (a dict from
  `IPNetwork` to a list of domain names), `ttl`, `proxied` (a dict from
  domain to bool), `record_comment`, `waf_lists` (a list of `WAFList`),
  `waf_list_description`, `detection_timeout` and `update_timeout`
  (seconds).
- `RecordParams(ttl, proxied, comment)` is what the setter receives for
  each domain.
- `WAFList(account_id, name)`; `describe()` gives `"account_id/name"`.
- `Deadline` wraps a `time.monotonic()` value (`None` never expires);
  `Deadline.after(seconds)` builds one, `expired()` tells whether it has
  passed and `remaining` gives the seconds left.

Functions:

```python
from ddnsupdater.updater import update_ips, final_delete_ips

message = update_ips(ppfmt, config, setter)
# ... on shutdown
message = final_delete_ips(ppfmt, config, setter)
```

- `detect_ip(ppfmt, config, ip_network)` asks the provider for one address
  and returns `(ip_or_None, Message)`.
- `update_ips` detects each managed family, sets the records of its domains
  when detection succeeded, then updates the WAF lists with the detected
  addresses – unless both families are managed and neither was detected.
- `final_delete_ips` deletes the records of each managed family's domains
  and clears the WAF lists.

The objects passed in are duck-typed:

- A provider has `get_ip(deadline, ppfmt, ip_network)` returning an address
  or `None`. A provider that also has `get_all_ips(deadline, ppfmt,
  ip_network)` is treated as returning several addresses, which are passed
  to the setter all at once.
- The setter has `set(deadline, ppfmt, ip_network, domain, ip, params)`,
  `set_multiple(deadline, ppfmt, ip_network, domain, ips, params)`,
  `final_delete(deadline, ppfmt, ip_network, domain, params)`,
  `set_waf_list(deadline, ppfmt, waf_list, description, detected, "")` and
  `final_clear_waf_list(deadline, ppfmt, waf_list, description)`, each
  returning a `ResponseCode`.
- `ppfmt` receives notices through `infof`, `noticef`,
  `notice_oncef(message_id, emoji, fmt, *args)` and `suppress(message_id)`,
  with `MessageID` values identifying hints shown only once.

Each setter call runs under its own `Deadline`; when a call fails after its
deadline has passed, a hint about raising `UPDATE_TIMEOUT` is reported once.
A failed detection past its deadline likewise hints at `DETECTION_TIMEOUT`.

## `ddnsupdater.messages`

- `IPNetwork.IP4` / `IPNetwork.IP6`, with `describe()` ("IPv4"/"IPv6") and
  `record_type()` ("A"/"AAAA").
- `ResponseCode`: `NOOP`, `UPDATING`, `UPDATED`, `FAILED`.
- `ResponseTally`: a dict of names by response code; `register(name, code)`.
- `MonitorMessage(ok, lines)` and `Message(monitor_message,
  notifier_message)`, the latter a list of sentences.
- Builders: `detect_message`, `update_message`, `final_delete_message`,
  `update_waf_lists_message`, `final_clear_waf_lists_message`.
- `merge_messages`, `merge_monitor_messages`, `merge_notifier_messages`.
  Merged monitor messages keep only the failing lines whenever anything
  failed.
- `join` ("a, b, c") and `english_join` ("a and b", "a, b, and c").

A notifier sentence looks like:

```
Failed to properly update A records of ip4.hello2 with 127.0.0.1; updating those of ip4.hello1; updated those of ip4.hello4.
```

## `ddnsupdater.signals`

- `setup()` returns a `SignalHandle` that catches SIGINT and SIGTERM.
  `wait_for_signals_until(ppfmt, deadline)` waits until `deadline` (a
  `time.monotonic()` value) and returns `True` if a caught signal
  interrupted it, `False` otherwise. `close()` (or leaving a `with` block)
  restores the previous handlers.
- `notify_context()` is a context manager yielding a cancellation object
  that those signals set: `cancelled`, `cause` (the signal, or `None`),
  `cancel()` and `wait(timeout)`. The previous handlers are restored on
  exit.

## What it does not do

The package contains no providers that look up addresses, no client for a
DNS service, no configuration reading from the environment, and no command
to run: callers supply the providers, the setter, the `ppfmt` reporter and
the loop that repeats the cycle.