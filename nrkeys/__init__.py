"""
nrkeys — manage New Relic API keys through the NerdGraph GraphQL API.

Public API:
    NerdGraphClient(config)                       → async transport/envelope codec
    query_key(client, key_id, key_type)           → Credential or None
    create_key(client, account_id, key_type, name, notes=None)
    update_key(client, key_id, name=None, notes=None)
    delete_key(client, key_id, key_type="INGEST")
"""

from __future__ import annotations

__version__ = "0.0.1"
