"""
Content component - Content lifecycle and state machine management.
"""

from .component import (
    DEFAULT_TRANSITIONS,
    LifecycleConfig,
    config_from_rules,
    normalize_tags,
    run,
    run_delete,
    run_get,
    run_get_by_slug,
    run_list,
    run_list_tags,
    run_publish,
    run_save_draft,
    run_unpublish,
    run_update_draft,
)
from .models import (
    ContentListOutput,
    ContentOperationOutput,
    ContentOutput,
    ContentPatch,
    ContentValidationError,
    DeleteContentInput,
    GetBySlugInput,
    GetContentInput,
    ListContentInput,
    ListTagsInput,
    PublishInput,
    SaveDraftInput,
    SlugLookupOutput,
    TagCount,
    TagCountsOutput,
    UnpublishInput,
    UpdateDraftInput,
    VideoSource,
)
from .ports import ContentRepoPort

__all__ = [
    # Entry points
    "run",
    "run_delete",
    "run_get",
    "run_get_by_slug",
    "run_list",
    "run_list_tags",
    "run_publish",
    "run_save_draft",
    "run_unpublish",
    "run_update_draft",
    # Configuration
    "DEFAULT_TRANSITIONS",
    "LifecycleConfig",
    "config_from_rules",
    "normalize_tags",
    # Input models
    "ContentPatch",
    "VideoSource",
    "DeleteContentInput",
    "GetBySlugInput",
    "GetContentInput",
    "ListContentInput",
    "ListTagsInput",
    "PublishInput",
    "SaveDraftInput",
    "UnpublishInput",
    "UpdateDraftInput",
    # Output models
    "ContentListOutput",
    "ContentOperationOutput",
    "ContentOutput",
    "ContentValidationError",
    "SlugLookupOutput",
    "TagCount",
    "TagCountsOutput",
    # Ports
    "ContentRepoPort",
]
