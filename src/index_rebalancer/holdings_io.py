"""JSON import and export of current holdings"""

import json
import logging
from decimal import Decimal
from pathlib import Path
from typing import List, Optional

from pydantic import TypeAdapter, ValidationError

from .exceptions import RebalanceValidationError
from .models import Holding
from .validation import InputValidator

logger = logging.getLogger(__name__)

FUND_SUFFIXES = ("ETF", "ETN", "ETP", "FUND", "TRUST")

_holdings_adapter = TypeAdapter(List[Holding])


def is_fund(symbol: str) -> bool:
    return symbol.upper().endswith(FUND_SUFFIXES)


def _record_errors(index: int, record: dict, validator: InputValidator) -> List[str]:
    errors = []
    label = f"Record {index + 1}"

    try:
        holding = Holding.model_validate(record)
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        return [f"{label}: invalid or missing fields ({fields})"]

    try:
        validator.validate_symbol(holding.symbol)
    except RebalanceValidationError:
        errors.append(f"{label}: Symbol is empty or invalid ({holding.symbol!r})")

    if holding.shares <= 0:
        errors.append(f"{label}: Shares must be greater than 0 (got {holding.shares})")
    else:
        try:
            validator.validate_shares(holding.shares)
        except RebalanceValidationError:
            errors.append(f"{label}: Shares out of range (got {holding.shares})")

    if holding.price <= 0:
        errors.append(f"{label}: Price must be greater than 0 (got {holding.price})")
    else:
        try:
            validator.validate_price(holding.price)
        except RebalanceValidationError:
            errors.append(f"{label}: Price out of range (got {holding.price})")

    return errors


def load_holdings(file_path: str | Path, validator: Optional[InputValidator] = None) -> List[Holding]:
    """
    Load current holdings from a JSON list of {symbol, shares, price}.

    Fund-like symbols (ETF, ETN, ETP, FUND, TRUST suffixes) are dropped.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file is empty, holds no records, holds invalid
            records, or holds nothing but funds
    """
    file_path = Path(file_path)
    validator = validator or InputValidator()
    logger.info(f"Importing holdings from: {file_path}")

    if not file_path.exists():
        logger.error(f"File not found: {file_path}")
        raise FileNotFoundError(f"File not found: {file_path}")

    content = file_path.read_text(encoding="utf-8")
    if not content.strip():
        logger.error(f"File is empty: {file_path}")
        raise ValueError(f"File is empty: {file_path}")

    try:
        records = json.loads(content)
    except json.JSONDecodeError as e:
        logger.error(f"Holdings file is not valid JSON: {e}")
        raise ValueError(f"Holdings file is not valid JSON: {e}") from e

    if not isinstance(records, list):
        raise ValueError("Holdings file must contain a JSON list")
    if not records:
        logger.error("Holdings file contains no records")
        raise ValueError("Holdings file contains no records")

    logger.debug(f"Read {len(records)} holding records")

    errors = []
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            errors.append(f"Record {index + 1}: expected an object")
            continue
        errors.extend(_record_errors(index, record, validator))

    if errors:
        logger.error("Validation errors found:")
        for error in errors:
            logger.error(f"  - {error}")
        raise ValueError("Validation errors found:\n" + "\n".join(errors))

    holdings = [Holding.model_validate(record) for record in records]
    funds = [h for h in holdings if is_fund(h.symbol)]
    stocks = [h for h in holdings if not is_fund(h.symbol)]

    if funds:
        logger.info("Funds detected and excluded from import:")
        for fund in funds:
            logger.info(f"  - {fund.symbol}")

    if not stocks:
        logger.error("No stocks found after excluding funds")
        raise ValueError("No stocks found after excluding funds")

    total_cost = sum((h.shares * h.price for h in stocks), Decimal("0"))
    logger.info(f"Imported {len(stocks)} holdings ({len(funds)} funds excluded), cost basis {total_cost:,.2f}")
    return stocks


def dump_holdings(holdings: List[Holding], file_path: str | Path) -> Path:
    """Write holdings as a JSON list; decimals are written as strings"""
    file_path = Path(file_path)
    file_path.write_bytes(_holdings_adapter.dump_json(holdings, indent=2))
    logger.info(f"Exported {len(holdings)} holdings to: {file_path}")
    return file_path
