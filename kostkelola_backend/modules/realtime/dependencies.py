"""Broker access for routes and services."""

from typing import Annotated

from fastapi import Depends, Request

from .broker import ChangeFeedBroker


def get_broker(request: Request) -> ChangeFeedBroker:
    return request.app.state.broker


Broker = Annotated[ChangeFeedBroker, Depends(get_broker)]
