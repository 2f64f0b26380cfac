# Standard library imports
import logging
from typing import List

# External package imports
from fastapi import APIRouter, HTTPException, status

# Local application imports
from ...application.dto.camera_dto import (
    CameraCreateRequest,
    CameraResponse,
    CameraUpdateRequest,
    MessageResponse,
)
from ...application.use_cases.camera import (
    CreateCameraUseCase,
    DeleteCameraUseCase,
    GetCameraUseCase,
    ListCamerasUseCase,
    UpdateCameraUseCase,
)
from ...core.exceptions import CamviewError
from ...di.container import get_container
from .errors import to_http_exception

logger = logging.getLogger(__name__)

router = APIRouter(tags=["cameras"])


@router.post("", response_model=CameraResponse, status_code=status.HTTP_201_CREATED)
async def create_camera(request: CameraCreateRequest) -> CameraResponse:
    """
    Register a camera by connecting to its ONVIF endpoint

    Args:
        request: Camera name, host, optional port and credentials

    Returns:
        CameraResponse with created camera information
    """
    container = get_container()
    create_camera_use_case = container.get(CreateCameraUseCase)

    try:
        return await create_camera_use_case.execute(request=request)
    except CamviewError as exception:
        logger.error(f"Camera registration failed for host {request.host}: {exception.message}")
        raise to_http_exception(exception)


@router.get("", response_model=List[CameraResponse])
async def list_cameras() -> List[CameraResponse]:
    container = get_container()
    list_cameras_use_case = container.get(ListCamerasUseCase)

    try:
        return await list_cameras_use_case.execute()
    except RuntimeError as exception:
        logger.error(f"Error fetching cameras: {exception}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch cameras."
        )


@router.get("/{camera_id}", response_model=CameraResponse)
async def get_camera(camera_id: str) -> CameraResponse:
    """
    Get a camera by ID

    Args:
        camera_id: ID of the camera

    Returns:
        CameraResponse with camera information
    """
    container = get_container()
    get_camera_use_case = container.get(GetCameraUseCase)

    try:
        return await get_camera_use_case.execute(camera_id=camera_id)
    except CamviewError as exception:
        raise to_http_exception(exception)


@router.put("/{camera_id}", response_model=CameraResponse)
async def update_camera(camera_id: str, request: CameraUpdateRequest) -> CameraResponse:
    container = get_container()
    update_camera_use_case = container.get(UpdateCameraUseCase)

    try:
        return await update_camera_use_case.execute(camera_id=camera_id, request=request)
    except CamviewError as exception:
        raise to_http_exception(exception)


@router.delete("/{camera_id}", response_model=MessageResponse)
async def delete_camera(camera_id: str) -> MessageResponse:
    container = get_container()
    delete_camera_use_case = container.get(DeleteCameraUseCase)

    try:
        await delete_camera_use_case.execute(camera_id=camera_id)
    except CamviewError as exception:
        raise to_http_exception(exception)
    return MessageResponse(message="Camera deleted successfully.")
