"""Request/response schemas for the templates API.

Names and categories are checked by the service so that they come back as
INVALID_TEMPLATE errors rather than request validation failures.
"""

from __future__ import annotations

from datetime import datetime

from looptimer.timers.models import AdvancedConfig
from looptimer.timers.schemas import ApiModel


class TemplateCreate(ApiModel):
    name: str
    category: str
    data: AdvancedConfig
    description: str | None = None
    icon: str | None = None
    color: str | None = None
    is_public: bool = False


class TemplateUpdate(ApiModel):
    name: str | None = None
    description: str | None = None
    category: str | None = None
    data: AdvancedConfig | None = None
    is_public: bool | None = None


class TemplateResponse(ApiModel):
    id: str
    user_id: str
    name: str
    description: str | None = None
    category: str
    icon: str | None = None
    color: str | None = None
    data: AdvancedConfig
    is_public: bool
    clone_count: int
    created_at: datetime
    updated_at: datetime
