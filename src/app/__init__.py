"""App - application core: services, infrastructure and wiring.

Subpackages:
- bootstrap/: composition root (factories, initialization, wiring)
- domain/: TeamMapping and Instance models
- services/: team registry and event forwarder
- infra/: concrete IO (HTTP, Hetzner inventory, mapping stores)
- protocols/: contracts between services and infrastructure
- observability/: correlation ids, log-based metrics

Pattern: app executes; api adapts; utils supports.
"""
