from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import List, Optional

from pydantic import TypeAdapter, ValidationError

from .errors import StorageError
from .json_store import CorruptFileError, read_json_array, write_json_array
from .models import DEFAULT_QUOTE, SEED_QUOTES, QuoteEntity
from .schemas import QuoteOut

logger = logging.getLogger(__name__)

_quote_list = TypeAdapter(List[QuoteOut])


# PUBLIC_INTERFACE
class QuoteService:
    """
    Serves a random quote from a JSON pool file.

    Never raises from random_quote(): any read or parse problem, or an empty
    pool, yields DEFAULT_QUOTE.
    """

    def __init__(self, path: str, rng: Optional[random.Random] = None) -> None:
        self._path = Path(path)
        self._rng = rng or random.Random()
        if not self._path.exists():
            try:
                write_json_array(self._path, list(SEED_QUOTES))
                logger.info("Initialized quote file with seed data path=%s", self._path)
            except StorageError:
                logger.warning("Could not create quote file path=%s", self._path, exc_info=True)

    def _load(self) -> List[QuoteEntity]:
        data = read_json_array(self._path)
        if data is None:
            return list(SEED_QUOTES)
        return [q.model_dump() for q in _quote_list.validate_python(data)]  # type: ignore[misc]

    def random_quote(self) -> QuoteEntity:
        try:
            quotes = self._load()
        except (StorageError, CorruptFileError, ValidationError) as e:
            logger.warning("Error reading quotes, using default quote: %s", e)
            return dict(DEFAULT_QUOTE)  # type: ignore[return-value]
        if not quotes:
            return dict(DEFAULT_QUOTE)  # type: ignore[return-value]
        return self._rng.choice(quotes)
