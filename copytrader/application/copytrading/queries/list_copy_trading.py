"""Queries для copy trading sessions."""

from dataclasses import dataclass

from copytrader.application.shared import Query


@dataclass(frozen=True)
class ListCopyTradingQuery(Query):
    """Active sessions of one follower."""

    follower_id: int


@dataclass(frozen=True)
class GetCopyTradingQuery(Query):
    follower_id: int
    session_id: int
