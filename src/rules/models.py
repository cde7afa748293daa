from pydantic import BaseModel, Field


class ProjectRules(BaseModel):
    slug: str
    rules_version: str
    required_sections: list[str]

class RangeRule(BaseModel):
    min: int
    max: int

class RegexRule(RangeRule):
    pattern: str

class SlugRules(RegexRule):
    reserved: list[str]
    max_probe_attempts: int = 1000
    fallback: str = "untitled"

class ContentRules(BaseModel):
    slug: SlugRules
    title: RangeRule
    excerpt: dict[str, int] # max: 500
    status_values: list[str]
    transitions: dict[str, list[str]]

class FormTimingRules(BaseModel):
    min_seconds: int
    max_seconds: int

class FieldLengthRules(BaseModel):
    name: RangeRule
    subject: RangeRule
    message: RangeRule
    email_max: int = 254

class ContactRules(BaseModel):
    cooldown_seconds: int
    form_timing: FormTimingRules
    lengths: FieldLengthRules
    spam_triggers: list[str]
    blocked_ip_prefixes: list[str] = Field(default_factory=list)

class StaticPage(BaseModel):
    path: str
    changefreq: str
    priority: float

class SeoRules(BaseModel):
    site_url: str
    article_path_prefix: str = "/articles/"
    article_changefreq: str = "monthly"
    article_priority: float = 0.7
    static_pages: list[StaticPage]
    disallow: list[str]
    cache_max_age_seconds: int = 3600
    robots_cache_max_age_seconds: int = 86400

class IdentityRules(BaseModel):
    algorithm: str = "HS256"
    require_verified_email: bool = True
    admin_emails: list[str] = Field(default_factory=list)

class VideoImportRules(BaseModel):
    channel_id: str = ""
    uploads_playlist_id: str = ""
    backfill_days: int = 30
    max_videos: int = 200
    max_tags: int = 50
    excerpt_length: int = 160

class OpsRules(BaseModel):
    data_dir_required: bool
    required_env: list[str]
    store_backend: str = "sqlite"

class Rules(BaseModel):
    project: ProjectRules
    content: ContentRules
    contact: ContactRules
    seo: SeoRules
    identity: IdentityRules
    ops: OpsRules
    video_import: VideoImportRules = Field(default_factory=VideoImportRules)
