"""
Command-line entry point.

Reads an input bundle (cash, index weights, prices, optional holdings) from
JSON, runs an index-only or current-portfolio rebalance, and prints the
result as JSON on stdout. Logs go to stderr.
"""
import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError
from rebalancer_config import AppConfig, load_config, set_config
from .exceptions import RebalanceValidationError
from .holdings_io import load_holdings
from .logger import configure_logging
from .models import RebalanceConfig
from .rebalancer import IndexRebalancer
from .validation import InputValidator

logger = logging.getLogger(__name__)

CONFIG_PATH_ENV = 'REBALANCER_CONFIG_PATH'


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='index-rebalancer',
        description='Compute buy/sell orders that move a portfolio toward index weights'
    )
    parser.add_argument('kind', choices=['index', 'current'],
                        help="'index' invests cash only; 'current' rebalances existing holdings")
    parser.add_argument('--input', required=True, type=Path,
                        help='JSON file with cash, index_weights, prices and optional holdings')
    parser.add_argument('--holdings', type=Path,
                        help='JSON holdings file; replaces holdings from --input')
    parser.add_argument('--config', type=Path,
                        help=f'YAML configuration file (default: ${CONFIG_PATH_ENV})')
    parser.add_argument('--commission', action='store_true',
                        help='Include trading commission in orders')
    parser.add_argument('--strict', action='store_true',
                        help='Fail instead of skipping symbols that lack price data')
    return parser


def _load_app_config(config_path: Optional[Path]) -> AppConfig:
    if config_path is None and os.getenv(CONFIG_PATH_ENV):
        config_path = Path(os.environ[CONFIG_PATH_ENV])
    if config_path is None:
        return set_config(AppConfig())
    return load_config(config_path)


def _load_rebalance_config(args: argparse.Namespace, validator: InputValidator) -> RebalanceConfig:
    with open(args.input, 'r', encoding='utf-8') as f:
        data = json.load(f)

    if args.holdings is not None:
        data['holdings'] = load_holdings(args.holdings, validator=validator)
    if args.commission:
        data['include_commission'] = True

    return RebalanceConfig.model_validate(data)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        app_config = _load_app_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        configure_logging(stream=sys.stderr)
        logger.error(f"Failed to load configuration: {e}")
        return 1

    configure_logging(app_config.logging, stream=sys.stderr)
    rebalancer = IndexRebalancer(app_config)

    try:
        rebalance_config = _load_rebalance_config(args, rebalancer.validator)
        rebalancer.validator.validate_inputs(rebalance_config, args.kind, require_all_prices=args.strict)
        if args.kind == 'index':
            result = rebalancer.rebalance_index(rebalance_config)
        else:
            result = rebalancer.rebalance_current_portfolio(rebalance_config)
    except RebalanceValidationError as e:
        logger.error(f"Rebalance rejected: {e}")
        return 1
    except (OSError, ValueError, ValidationError) as e:
        logger.error(f"Failed to read input: {e}")
        return 1

    sys.stdout.write(result.model_dump_json(indent=2) + "\n")
    return 0


if __name__ == '__main__':
    sys.exit(main())
