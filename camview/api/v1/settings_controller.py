# External package imports
from fastapi import APIRouter

# Local application imports
from ...application.dto.settings_dto import (
    AppSettingsResponse,
    SettingUpdateRequest,
    SettingUpdateResponse,
)
from ...application.use_cases.settings import GetAppSettingsUseCase, UpdateAppSettingUseCase
from ...core.exceptions import CamviewError
from ...di.container import get_container
from .errors import to_http_exception


router = APIRouter(tags=["settings"])


@router.get("", response_model=AppSettingsResponse)
async def get_settings() -> AppSettingsResponse:
    container = get_container()
    return await container.get(GetAppSettingsUseCase).execute()


@router.put("/{key}", response_model=SettingUpdateResponse)
async def update_setting(key: str, request: SettingUpdateRequest) -> SettingUpdateResponse:
    """
    Store one setting. Booleans are stored as lower-case "true"/"false".
    """
    container = get_container()
    update_use_case = container.get(UpdateAppSettingUseCase)

    try:
        return await update_use_case.execute(key=key, value=request.value)
    except CamviewError as exception:
        raise to_http_exception(exception)
