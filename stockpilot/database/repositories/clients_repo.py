from __future__ import annotations
from dataclasses import dataclass

from ...constants import COL_CLIENTS
from ...errors import ValidationError
from ...utils.helpers import new_id
from ...utils.validators import require_text
from .base import CollectionRepo, Record


@dataclass
class Client(Record):
    id: str
    name: str
    phone: str = ""
    email: str = ""
    tax_id: str = ""
    address: str = ""


class ClientsRepo(CollectionRepo[Client]):
    collection = COL_CLIENTS
    record_type = Client

    # ---- Internal helpers -------------------------------------------------

    @staticmethod
    def _validated(client: Client) -> Client:
        client.name = require_text(client.name, "name", "Name", min_len=3)
        client.phone = require_text(client.phone, "phone", "Phone", min_len=10)
        email = (client.email or "").strip()
        if "@" not in email or email.startswith("@") or email.endswith("@"):
            raise ValidationError("email", "Invalid e-mail address.")
        client.email = email
        client.tax_id = require_text(client.tax_id, "tax_id", "Tax ID", min_len=11)
        client.address = require_text(client.address, "address", "Address", min_len=5)
        return client

    # ---- Queries ----------------------------------------------------------

    def list_clients(self) -> list[Client]:
        return sorted(self.list_all(), key=lambda c: c.name.lower())

    def search(self, term: str) -> list[Client]:
        """
        Match name, tax id or phone. Terms shorter than 3 characters return
        nothing, as the client picker only starts suggesting after 3.
        """
        t = (term or "").strip().lower()
        if len(t) < 3:
            return []
        return [
            c for c in self.list_all()
            if t in c.name.lower() or t in (c.tax_id or "") or t in (c.phone or "")
        ]

    def name_of(self, client_id: str | None, default: str = "Unknown client") -> str:
        if not client_id:
            return default
        c = self.get(client_id)
        return c.name if c else default

    # ---- Mutations --------------------------------------------------------

    def create(self, name: str, phone: str, email: str, tax_id: str, address: str) -> Client:
        client = self._validated(
            Client(id=new_id(), name=name, phone=phone, email=email, tax_id=tax_id, address=address)
        )
        return self.add(client)

    def update(self, client: Client) -> Client:
        return self.replace(self._validated(client))

    def delete(self, client_id: str) -> None:
        # No cascade: historical sales keep the id and show a placeholder.
        self.remove(client_id)
