from __future__ import annotations

import json
import logging
from typing import Tuple

from pydantic import TypeAdapter

from .models import Fact

logger = logging.getLogger(__name__)

_facts_adapter = TypeAdapter(Tuple[Fact, ...])


def load_facts(path: str) -> Tuple[Fact, ...]:
    """Read the country table once at startup. The result is never mutated."""

    with open(path, encoding="utf-8") as fh:
        facts = _facts_adapter.validate_python(json.load(fh))
    if not facts:
        raise ValueError(f"Fact table {path} is empty")
    logger.info("Loaded %d facts from %s", len(facts), path)
    return facts
