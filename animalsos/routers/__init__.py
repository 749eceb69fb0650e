"""
FastAPI routers grouped by domain (auth, users, reports, vets, adoptions,
donations, posts). Handlers reach storage only through ``app.state.storage``.
"""
