from typing import Any, Optional
from pydantic import BaseModel


class AppSettingsResponse(BaseModel):
    """Current values of the public settings (stored strings, None when unset)"""
    keep_streams_open: Optional[str] = None
    ollamaHost: Optional[str] = None
    ollamaModel: Optional[str] = None


class SettingUpdateRequest(BaseModel):
    """DTO for PUT /settings/{key}"""
    value: Any = None


class SettingUpdateResponse(BaseModel):
    message: str
    key: str
    value: str
