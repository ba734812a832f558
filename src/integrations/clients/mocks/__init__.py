"""
Mock integration clients.

These clients return fake (but realistic) responses without calling any external API.
They are used when:
- provider credentials are not configured (local development)
- INTEGRATIONS_MODE is "mock" or "test"

Important:
- Mock clients must follow the SAME interface as real HTTP clients.
- Mock clients should return data shaped according to src/integrations/contracts/*
"""
