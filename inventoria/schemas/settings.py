from pydantic import Field

from inventoria.core.constants import EXPIRES_SOON_DAYS_RANGE
from inventoria.schemas.common import ApiModel

_MIN_DAYS, _MAX_DAYS = EXPIRES_SOON_DAYS_RANGE


class ExpiresThreshold(ApiModel):
    expires_soon_threshold: int = Field(ge=_MIN_DAYS, le=_MAX_DAYS)
