"""ACL and DNS forwarding policy service backed by etcd."""

__version__ = "1.0.0"
