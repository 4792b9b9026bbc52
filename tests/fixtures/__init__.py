"""
Shared test helpers for the Snoocore suite.

- http_mocking: MockTransport-backed route table, response builder, form decoding
"""
