import json
import logging
import os

from pydantic import BaseModel, Field

from owner_lookup.address import ABBREVIATIONS, CITY_TOKENS, DEFAULT_NORMALIZER, AddressNormalizer

logger = logging.getLogger(__name__)

TABLES_PATH_ENV = "ADDRESS_TABLES_PATH"


class TablesConfig(BaseModel):
    abbreviations: dict[str, str] = Field(
        default_factory=dict, description="Full word or phrase -> USPS abbreviation"
    )
    city_tokens: list[str] = Field(
        default_factory=list, description="City/state names that start the locality suffix"
    )
    replace_defaults: bool = Field(
        False, description="Use only these entries instead of merging them over the built-in tables"
    )


def get_tables_path() -> str | None:
    return os.environ.get(TABLES_PATH_ENV) or None


def load_tables_config(path: str) -> TablesConfig:
    with open(path, encoding="utf-8") as f:
        raw = json.load(f)
    return TablesConfig.model_validate(raw)


def build_normalizer(config: TablesConfig) -> AddressNormalizer:
    if config.replace_defaults:
        abbreviations = dict(config.abbreviations)
        cities = set(config.city_tokens)
    else:
        abbreviations = {**ABBREVIATIONS, **{k.upper(): v for k, v in config.abbreviations.items()}}
        cities = set(CITY_TOKENS) | {c.upper() for c in config.city_tokens}
    return AddressNormalizer(abbreviations=abbreviations, city_tokens=cities)


def load_normalizer(path: str | None = None) -> AddressNormalizer:
    """Normalizer for the tables file at ``path`` (or $ADDRESS_TABLES_PATH), else the defaults.

    File and validation errors propagate to the caller.
    """
    path = path or get_tables_path()
    if not path:
        return DEFAULT_NORMALIZER

    config = load_tables_config(path)
    normalizer = build_normalizer(config)
    logger.info(
        "Loaded address tables from %s: %d abbreviations, %d city tokens%s",
        path,
        len(normalizer.abbreviations),
        len(normalizer.city_phrases),
        " (defaults replaced)" if config.replace_defaults else "",
    )
    return normalizer
