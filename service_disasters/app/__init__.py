"""
Disasters Service package for the Relief Coordination backend.

The service stores disaster reports, finds nearby relief resources and
enriches reports with third-party data:
- Records: MongoDB collections with 2dsphere indexes
- Geocoding: Gemini location extraction followed by a geocoding provider
- Updates: scraped official pages and a social feed behind a TTL cache

Structure:
- app.main: FastAPI app, routes, and lifecycle wiring.
- app.adapters: Clients for external collaborators.
- app.caching: Cache-aside manager and cache store backends.
- app.persistence: MongoDB record store.
- app.domain: Record and payload models.
"""
