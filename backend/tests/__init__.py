"""
Pytest suite for the TipSplit backend.

Test categories:
- Unit tests: fee math, validation, ledgers, event emission, tip service
- API tests: FastAPI app over httpx ASGITransport with the in-memory ledger
- Integration tests: atomic rollback across both tip legs
"""
