from .base import (  # noqa: F401
    CoreBaseModel,
    RequestMetadataModel,
    TimestampedModel,
    UUIDPrimaryKeyModel,
)
