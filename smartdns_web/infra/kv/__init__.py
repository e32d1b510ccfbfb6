"""Hierarchical key-value store access.

Two implementations of KVStoreProtocol:
    EtcdClient: etcd v3 over the JSON gateway (production)
    InMemoryKVStore: dict-backed store for tests and local development

Lifecycle helpers start_kv_store/stop_kv_store manage the process-wide
handle returned by get_kv_store.
"""

from smartdns_web.infra.kv.client import EtcdClient
from smartdns_web.infra.kv.codec import dump_record, load_record
from smartdns_web.infra.kv.mock_client import CallRecord, InMemoryKVStore
from smartdns_web.infra.kv.protocols import KeyValue, KVStoreProtocol
from smartdns_web.infra.kv.service import (
    create_kv_store,
    get_kv_store,
    start_kv_store,
    stop_kv_store,
)

__all__ = [
    "CallRecord",
    "EtcdClient",
    "InMemoryKVStore",
    "KVStoreProtocol",
    "KeyValue",
    "create_kv_store",
    "dump_record",
    "get_kv_store",
    "load_record",
    "start_kv_store",
    "stop_kv_store",
]
