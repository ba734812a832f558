"""
Contracts (data models).

This folder defines the request/response shapes for external integrations:
- STK push request payloads and result callbacks
- transactional email messages
- order and payment records passed between services

Both mock and real HTTP clients use these contracts, so flows rely on stable
models rather than on ad-hoc dicts.
"""
