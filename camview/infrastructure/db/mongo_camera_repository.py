# Standard library imports
from typing import Any, Dict, List, Optional

# External package imports
from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ReturnDocument

# Local application imports
from ...domain.constants import CameraFields
from ...domain.models.camera import Camera
from ...domain.repositories.camera_repository import CameraRepository
from .mongo_connection import get_camera_collection


class MongoCameraRepository(CameraRepository):
    """Camera registry stored in the MongoDB "cameras" collection"""

    def __init__(self, camera_collection: Optional[AsyncIOMotorCollection] = None) -> None:
        self.camera_collection = camera_collection if camera_collection is not None else get_camera_collection()

    def _id_filter(self, camera_id: str) -> Dict[str, Any]:
        """
        Build a lookup filter for a camera id.

        Cameras carry a generated "id" field (e.g. "CAM-43C1E6AFB726"); documents
        inserted by hand may only have a MongoDB ObjectId.
        """
        try:
            object_id = ObjectId(camera_id)
        except (InvalidId, TypeError):
            return {CameraFields.ID: camera_id}
        return {"$or": [{CameraFields.ID: camera_id}, {CameraFields.MONGO_ID: object_id}]}

    async def find_by_id(self, camera_id: str) -> Optional[Camera]:
        """
        Look up one camera

        Returns:
            Camera, or None when no document matches
        """
        if not camera_id:
            return None

        try:
            document = await self.camera_collection.find_one(self._id_filter(camera_id))
        except Exception as e:
            raise RuntimeError(f"Error finding camera {camera_id}: {e}")
        return self._to_camera(document) if document else None

    async def find_all(self) -> List[Camera]:
        try:
            return [self._to_camera(document) async for document in self.camera_collection.find({})]
        except Exception as e:
            raise RuntimeError(f"Error listing cameras: {e}")

    async def save(self, camera: Camera) -> Camera:
        """
        Update the camera's document in place, or insert it when it has no
        stored counterpart yet.
        """
        fields = self._to_document(camera)

        try:
            if camera.id:
                updated = await self.camera_collection.find_one_and_update(
                    self._id_filter(camera.id),
                    {"$set": fields},
                    return_document=ReturnDocument.AFTER,
                )
                if updated is not None:
                    return self._to_camera(updated)

            inserted = await self.camera_collection.insert_one(fields)
            document = await self.camera_collection.find_one({CameraFields.MONGO_ID: inserted.inserted_id})
        except Exception as e:
            raise RuntimeError(f"Error saving camera {camera.name}: {e}")

        if document is None:
            raise RuntimeError(f"Camera {camera.name} was inserted but could not be read back")
        return self._to_camera(document)

    async def delete(self, camera_id: str) -> bool:
        if not camera_id:
            return False

        try:
            result = await self.camera_collection.delete_one(self._id_filter(camera_id))
        except Exception as e:
            raise RuntimeError(f"Error deleting camera {camera_id}: {e}")
        return result.deleted_count > 0

    @staticmethod
    def _to_camera(document: Dict[str, Any]) -> Camera:
        # Generated "id" wins over MongoDB "_id"
        camera_id = document.get(CameraFields.ID)
        if camera_id is None and CameraFields.MONGO_ID in document:
            camera_id = str(document[CameraFields.MONGO_ID])

        return Camera(
            id=camera_id,
            name=document.get(CameraFields.NAME, ""),
            stream_url=document.get(CameraFields.STREAM_URL, ""),
            onvif_url=document.get(CameraFields.ONVIF_URL),
            username=document.get(CameraFields.USERNAME),
            password=document.get(CameraFields.PASSWORD),
        )

    @staticmethod
    def _to_document(camera: Camera) -> Dict[str, Any]:
        document: Dict[str, Any] = {
            CameraFields.NAME: camera.name,
            CameraFields.STREAM_URL: camera.stream_url,
            CameraFields.ONVIF_URL: camera.onvif_url,
            CameraFields.USERNAME: camera.username,
            CameraFields.PASSWORD: camera.password,
        }
        if camera.id:
            document[CameraFields.ID] = camera.id
        return document
