"""JSON Schema bundle of the published record types."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from core.models.action import Action, Bracket
from core.models.bar import Bar
from core.models.features import FeatureVector
from core.models.risk import RiskVerdict
from core.models.signal import AlphaSignal

SCHEMA_DIALECT = "https://json-schema.org/draft/2020-12/schema"
BUNDLE_TITLE = "Quant Decision Core Schemas"
BUNDLE_VERSION = "0.1.0"

PUBLISHED_MODELS: dict[str, type[BaseModel]] = {
    "Bar": Bar,
    "FeatureVector": FeatureVector,
    "AlphaSignal": AlphaSignal,
    "Bracket": Bracket,
    "Action": Action,
    "RiskVerdict": RiskVerdict,
}


def schema_bundle() -> dict[str, Any]:
    """JSON Schema of every published record, keyed by record name."""
    return {
        "$schema": SCHEMA_DIALECT,
        "title": BUNDLE_TITLE,
        "version": BUNDLE_VERSION,
        "schemas": {
            name: model.model_json_schema() for name, model in PUBLISHED_MODELS.items()
        },
    }
