from dataclasses import dataclass

from ...constants import COL_BRANDS
from ...utils.helpers import new_id
from ...utils.validators import require_text
from .base import CollectionRepo, Record


@dataclass
class Brand(Record):
    id: str
    name: str


class BrandsRepo(CollectionRepo[Brand]):
    collection = COL_BRANDS
    record_type = Brand

    def list_brands(self) -> list[Brand]:
        return sorted(self.list_all(), key=lambda b: b.name.lower())

    def create(self, name: str) -> Brand:
        return self.add(Brand(id=new_id(), name=require_text(name, "name", "Name")))

    def update(self, brand_id: str, name: str) -> Brand:
        return self.replace(Brand(id=brand_id, name=require_text(name, "name", "Name")))

    def delete(self, brand_id: str) -> None:
        self.remove(brand_id)
