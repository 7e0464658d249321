# rlarena

Building blocks for the backend of an arena where reinforcement-learning agents play
ranked matches against one another. Everything here runs in-process and uses only the
standard library.

- `rlarena.elo`: ELO ratings with provisional K-factors (40 below 10 matches,
  32 below 20, 24 after that), returned as `RatingUpdate` named tuples.
- `rlarena.agent_service`: `AgentService` for agent creation, ownership checks,
  paging and leaderboards, on top of a repository object you supply;
  `assign_ranks` gives agents with equal ELO the same rank.
- `rlarena.ratelimit`: an in-process `TokenBucket` and a per-key `RateLimiter`
  that prunes idle buckets from a background thread.
- `rlarena.hub`: a `Hub` that routes messages, such as build-status notifications,
  to `HubClient` connections, one per user.
- `rlarena.scan`: `summarize_scan` counts vulnerabilities by severity in a JSON scan
  report; `SecurityScanner` turns a report into a notification.
- `rlarena.storage`: `Storage` saves uploaded `.py`/`.zip` files and runs simple
  checks on Python code.
- `rlarena.log`: structured logging with key/value fields (`init`, `debug`, `info`,
  `warn`, `error`, `fatal`, `sync`).
- `rlarena.errors`: the exceptions the services raise, all subclasses of
  `ServiceError`.

## Installing

```
pip install rlarena
```

## Examples

Rating a match:

```python
from rlarena.elo import EloService

elo = EloService()
update = elo.calculate_new_ratings_with_match_counts(1200, 1200, 5, 50, 1.0)
print(update.agent1_change, update.agent2_change)  # 20 -12
```

Limiting requests per user:

```python
from rlarena.ratelimit import RateLimiter

with RateLimiter(capacity=3, refill_rate=1) as limiter:
    if not limiter.allow("user-1"):
        print("slow down")
```

Delivering a build notification:

```python
from rlarena.hub import Hub, HubClient

hub = Hub()
client = HubClient("user-1")
hub.register(client)
hub.send_build_status("user-1", "sub-1", "active", "Build completed successfully", "")
hub.process_pending()
print(client.receive(timeout=0).to_json())
```

`Hub.run()` routes messages continuously until `Hub.stop()` is called; run it in a
thread of its own.

Summarizing a scan report:

```python
from rlarena.scan import summarize_scan

summary = summarize_scan('{"Results": [{"Vulnerabilities": [{"Severity": "HIGH"}]}]}')
print(summary.message, summary.status)
```

Logging:

```python
from rlarena import log

log.init("debug")          # "production" gives JSON lines on standard error
log.info("Match created", matchId="m-1")
```

## What the package does not do

- It has no HTTP or WebSocket server: `Hub` buffers messages per client, and sending
  them over a network connection is up to the caller.
- It has no database layer: `AgentService` works with any repository object that
  provides the methods it calls.
- It does not issue or verify access tokens.
- It has no distributed locks, shared queues or cross-process rate limiting; the rate
  limiter keeps its state in the current process.
- It does not run image builds or vulnerability scans; it only reads scan reports.

## Running the tests

```
pip install -e ".[test]"
pytest
```