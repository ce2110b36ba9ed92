"""
Currency Table

Loads the static ISO 4217 currency table (code -> display and arithmetic
parameters) and validates every row with pydantic.
"""

import json
import logging
from decimal import Decimal
from functools import lru_cache
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

from pydantic import BaseModel, Field, model_validator

logger = logging.getLogger(__name__)


class CurrencyRecord(BaseModel):
    """One row of the currency table"""
    name: str
    iso_code: int = Field(..., alias="code", description="Numeric ISO 4217 code")
    rate: Decimal = Decimal("1")
    precision: int = Field(..., ge=0)
    subunit: int = Field(..., ge=1)
    symbol: str
    symbol_first: bool
    decimal_mark: str
    thousands_separator: str
    
    @model_validator(mode="after")
    def _check_subunit(self) -> "CurrencyRecord":
        if self.subunit != 10 ** self.precision:
            raise ValueError(
                f"subunit {self.subunit} does not match precision {self.precision}"
            )
        return self


def _read_table_text(path: Optional[str]) -> str:
    if path is None:
        return (
            resources.files("moneykit")
            .joinpath("resources")
            .joinpath("currencies.json")
            .read_text(encoding="utf-8")
        )
    return Path(path).read_text(encoding="utf-8")


@lru_cache(maxsize=None)
def load_currency_table(path: Optional[str] = None) -> Mapping[str, CurrencyRecord]:
    """
    Load and validate the currency table.
    
    Args:
        path: JSON file to read; the packaged ISO 4217 table when None
        
    Returns:
        Read-only mapping of upper-case ISO code to CurrencyRecord
        
    Raises:
        OSError: If the file cannot be read
        pydantic.ValidationError: If a row is malformed
    """
    data = json.loads(_read_table_text(path))
    
    table = {
        code.strip().upper(): CurrencyRecord.model_validate(attributes)
        for code, attributes in data.items()
    }
    
    logger.info(f"Loaded {len(table)} currencies from {path or 'packaged table'}")
    return MappingProxyType(table)
