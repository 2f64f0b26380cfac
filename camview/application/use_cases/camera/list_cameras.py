# Standard library imports
from typing import List

# Local application imports
from ....domain.repositories.camera_repository import CameraRepository
from ...dto.camera_dto import CameraResponse


class ListCamerasUseCase:
    """Use case for listing all registered cameras"""

    def __init__(self, camera_repository: CameraRepository) -> None:
        self.camera_repository = camera_repository

    async def execute(self) -> List[CameraResponse]:
        cameras = await self.camera_repository.find_all()
        return [CameraResponse.from_domain(camera) for camera in cameras]
