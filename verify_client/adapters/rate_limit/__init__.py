"""Rate limiting adapters.

A small abstraction layer over the local request buckets, so the client
depends on an interface rather than on the in-memory fixed-window counter.
"""
