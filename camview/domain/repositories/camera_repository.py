from abc import ABC, abstractmethod
from typing import Optional, List
from ..models.camera import Camera


class CameraRepository(ABC):
    """Repository interface - defines contract for camera data access"""

    @abstractmethod
    async def find_by_id(self, camera_id: str) -> Optional[Camera]:
        """Find camera by ID"""
        pass

    @abstractmethod
    async def find_all(self) -> List[Camera]:
        """List every registered camera"""
        pass

    @abstractmethod
    async def save(self, camera: Camera) -> Camera:
        """Save camera (create or update)"""
        pass

    @abstractmethod
    async def delete(self, camera_id: str) -> bool:
        """Delete camera. Returns False if nothing was deleted"""
        pass
