"""
Runtime configuration for hashpath.

Values are read from the environment with the ``HASHPATH_`` prefix, e.g.
``HASHPATH_SESSION_SOURCE_ID=commcaresession``. Mapping values such as
``HASHPATH_HASHTAG_NAMESPACES`` are given as JSON.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Conventions used when building data-source trees and form hashtags.

    Params:
        session_source_id: Source id resolved as the hidden tree root
        hashtag_namespaces: Source id -> hashtag given to the first reference into it
        relation_key: Key used to join relation (index) nodes to their target
        case_type_key: Subset key preferred when picking a subset by id
        form_hashtag_prefix: Hashtag prefix for form questions
        form_data_root: Path of the form's primary instance root
        not_found_name: Display name of the placeholder source used when none load
    """

    model_config = SettingsConfigDict(env_prefix="HASHPATH_", extra="ignore")

    session_source_id: str = "commcaresession"
    hashtag_namespaces: dict[str, str] = Field(
        default_factory=lambda: {"casedb": "#case"}
    )
    relation_key: str = "@case_id"
    case_type_key: str = "@case_type"
    form_hashtag_prefix: str = "#form"
    form_data_root: str = "/data"
    not_found_name: str = "Not Found"


settings = Settings()
