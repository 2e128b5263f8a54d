# app/api/v1/routes/clients.py
"""
Client list for the authenticated accountant: list, add, delete.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status

from app.api.v1.deps import CurrentUser, get_current_user, get_ledger_store
from app.api.v1.envelope import ok
from app.api.v1.schemas.clients import ClientCreate, ClientDetail
from app.domain.models.ledger import Client
from app.domain.services import ledger_service
from app.domain.services.ledger_service import LedgerStore

logger = logging.getLogger("api.v1.clients")

router = APIRouter(prefix="/clients", tags=["Clients"])


def _client_to_detail(client: Client) -> dict:
    return ClientDetail(
        id=client.id,
        name=client.name,
        gstin=client.gstin,
        created_at=client.created_at,
    ).model_dump()


@router.get("", response_model=dict)
async def list_clients(
    user: CurrentUser = Depends(get_current_user),
    store: LedgerStore = Depends(get_ledger_store),
):
    """List the caller's clients, newest first."""
    clients = await ledger_service.list_clients(store, user.id)
    return ok(data=[_client_to_detail(c) for c in clients])


@router.post("", response_model=dict, status_code=status.HTTP_201_CREATED)
async def create_client(
    body: ClientCreate,
    user: CurrentUser = Depends(get_current_user),
    store: LedgerStore = Depends(get_ledger_store),
):
    client = await ledger_service.add_client(store, user.id, body.name, body.gstin)
    return ok(data=_client_to_detail(client), message="Client added")


@router.delete("/{client_id}", response_model=dict)
async def delete_client(
    client_id: str,
    user: CurrentUser = Depends(get_current_user),
    store: LedgerStore = Depends(get_ledger_store),
):
    """
    Delete a client. Its invoices are not deleted with it.
    """
    await ledger_service.delete_client(store, user.id, client_id)
    return ok(message="Client deleted")
