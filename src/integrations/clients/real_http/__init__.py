"""
Real HTTP integration clients.

These clients talk to the real external systems via HTTP:
- Daraja OAuth + STK push (mpesa.py)
- Brevo transactional email and contacts (brevo.py)

Important:
- Must implement the same interfaces as the mock clients
- Must return data shaped according to src/integrations/contracts/*

Switching:
The selection of mock vs real clients happens in src/api/dependencies.py only.
"""
