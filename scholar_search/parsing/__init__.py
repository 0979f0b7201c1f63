"""Parsers for harvested metadata documents."""

from .oai_dc import OaiBatch, parse_list_records, parse_oai_dc

__all__ = ["OaiBatch", "parse_list_records", "parse_oai_dc"]
