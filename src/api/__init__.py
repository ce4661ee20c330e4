"""API - edge layer.

Subpackages:
- connectors/: outbound adapters (Slack, instance config service) and
  inbound Slack request handling (signature, parsing)
- routes/: HTTP endpoints

Must not contain registry or forwarding logic; that lives in app.services.
"""
