from fastapi import FastAPI, Request

from files_store.adapters.storage import BaseStore, StoreFactory


def get_app_store(app: FastAPI) -> BaseStore:
    """Return the store attached to ``app``, building the configured one on first use."""
    store = getattr(app.state, "store", None)
    if store is None:
        store = StoreFactory.get_store(app.state.settings)
        app.state.store = store
    return store


def get_store(request: Request) -> BaseStore:
    """Store dependency."""
    return get_app_store(request.app)
