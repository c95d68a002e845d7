from typing import List

from ..exceptions import NotFoundException
from ..models import RepairService
from ..repositories import Storage
from ..schemas.repair_service import RepairServiceCreate, RepairServiceUpdate


class RepairCatalogService:
    """Repair services offered to customers (screen repair, data recovery...)."""

    def __init__(self, storage: Storage):
        self.storage = storage


    async def list_services(self) -> List[RepairService]:
        return await self.storage.get_repair_services()


    async def get_service(self, service_id: str) -> RepairService:
        service = await self.storage.get_repair_service(service_id)

        if not service:
            raise NotFoundException("Repair service not found")

        return service


    async def create_service(self, data: RepairServiceCreate) -> RepairService:
        return await self.storage.create_repair_service(data.model_dump())


    async def update_service(self, service_id: str, data: RepairServiceUpdate) -> RepairService:
        await self.get_service(service_id)
        return await self.storage.update_repair_service(service_id, data.model_dump(exclude_unset=True))


    async def delete_service(self, service_id: str) -> None:
        await self.get_service(service_id)
        await self.storage.delete_repair_service(service_id)
